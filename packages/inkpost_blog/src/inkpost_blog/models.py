from typing import Optional

from inkpost_db.models import Model, TimestampMixin
from sqlalchemy import Boolean, Index, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from .slugs import SLUG_MAX_LENGTH

POST_TABLE_NAME = "posts"


class Post(Model, TimestampMixin):
    """A blog post. ``author`` is free text, not a reference to ``users``."""

    __tablename__ = POST_TABLE_NAME
    __table_args__ = (
        Index("idx_posts_published", "published"),
        Index("idx_posts_created_at", "created_at"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    slug: Mapped[str] = mapped_column(
        String(SLUG_MAX_LENGTH), unique=True, index=True, nullable=False
    )
    author: Mapped[str] = mapped_column(String(100), nullable=False)
    published: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, slug='{self.slug}')>"
