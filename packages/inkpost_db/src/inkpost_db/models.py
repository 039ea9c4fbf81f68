from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING, Any, ClassVar, Self

from sqlalchemy import DateTime, func
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

if TYPE_CHECKING:
    from .manager import ModelManager


class Model(AsyncAttrs, DeclarativeBase):
    """
    Declarative base for Inkpost tables.

    Every concrete subclass gets an integer ``id`` primary key and its own
    ``objects`` manager::

        >>> post = await Post.objects.get(db, Post.slug == "hello-world")
        >>> drafts = Post.objects.filter(Post.published.is_(False))
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(primary_key=True)
    objects: ClassVar[ModelManager[Self]]  # type: ignore[misc]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Imported here: manager.py imports this module
        from .manager import ModelManager

        if "__abstract__" not in cls.__dict__:
            cls.objects = ModelManager(cls)


def _timestamp_column(**kwargs: Any) -> Mapped[datetime]:
    return mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        server_default=func.now(),
        nullable=False,
        **kwargs,
    )


class CreatedAtMixin:
    """Row creation time, filled in by the database."""

    created_at: Mapped[datetime] = _timestamp_column()


class TimestampMixin(CreatedAtMixin):
    """``created_at`` plus ``updated_at``, which moves on every UPDATE."""

    updated_at: Mapped[datetime] = _timestamp_column(onupdate=func.now())
