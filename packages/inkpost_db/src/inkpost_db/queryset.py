from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Generic,
    Sequence,
    Type,
    TypeVar,
)

from sqlalchemy import func, select

from .models import Model

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql import ColumnElement, Select


T = TypeVar("T", bound=Model)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the total row count behind it."""

    items: Sequence[T]
    total: int
    page: int
    limit: int


@dataclass(frozen=True)
class QuerySet(Generic[T]):
    """
    Lazy, immutable query builder for a specific model type.

    A QuerySet keeps the pieces of a SELECT apart: an ordered list of
    predicates (AND-ed together), ordering criteria, limit and offset. Every
    value inside a predicate is a bound parameter; no user input is ever
    spliced into the SQL text. SQL is emitted only by the async terminal
    methods (``fetch``, ``first``, ``count``, ``exists``, ``paginate``).

    Because the predicates are stored on their own, ``count()`` can re-issue
    exactly the same filter without the ordering or pagination.

    Examples:
        >>> qs = Post.objects.filter(Post.published.is_(True))
        >>> qs = qs.order_by(Post.created_at.desc()).limit(10)
        >>> posts = await qs.fetch(db)
    """

    model: Type[T]
    predicates: tuple[ColumnElement[bool], ...] = field(default=())
    ordering: tuple[Any, ...] = field(default=())
    limit_value: int | None = None
    offset_value: int | None = None

    def _clone(self, **changes: Any) -> QuerySet[T]:
        """Each modification returns a new instance to ensure immutability."""
        return QuerySet(
            model=changes.get("model", self.model),
            predicates=changes.get("predicates", self.predicates),
            ordering=changes.get("ordering", self.ordering),
            limit_value=changes.get("limit_value", self.limit_value),
            offset_value=changes.get("offset_value", self.offset_value),
        )

    # --- Chainable methods ---

    def filter(self, *conditions: ColumnElement[bool] | None) -> QuerySet[T]:
        """
        Add WHERE predicates. ``None`` entries are skipped so optional filters
        can be passed straight through.

        Example:
            >>> Post.objects.filter(Post.slug == "hello-world")
            # SELECT * FROM posts WHERE slug = :slug_1;
        """
        extra = tuple(c for c in conditions if c is not None)
        if not extra:
            return self
        return self._clone(predicates=self.predicates + extra)

    def order_by(self, *criterion: Any) -> QuerySet[T]:
        """
        Replace the ORDER BY criteria.

        Example:
            >>> Post.objects.order_by(Post.created_at.desc(), Post.id.desc())
        """
        return self._clone(ordering=tuple(criterion))

    def limit(self, count: int) -> QuerySet[T]:
        return self._clone(limit_value=count)

    def offset(self, count: int) -> QuerySet[T]:
        return self._clone(offset_value=count)

    # --- Statement construction ---

    def statement(self) -> Select:
        """Build the full SELECT: filters, ordering, then pagination."""
        stmt = select(self.model)
        if self.predicates:
            stmt = stmt.where(*self.predicates)
        if self.ordering:
            stmt = stmt.order_by(*self.ordering)
        if self.limit_value is not None:
            stmt = stmt.limit(self.limit_value)
        if self.offset_value is not None:
            stmt = stmt.offset(self.offset_value)
        return stmt

    def count_statement(self) -> Select:
        """
        Build ``SELECT count(*)`` over the predicates alone.

        Example:
            >>> Post.objects.filter(Post.published.is_(True)).count_statement()
            # SELECT count(*) FROM posts WHERE published IS 1;
        """
        stmt = select(func.count()).select_from(self.model)
        if self.predicates:
            stmt = stmt.where(*self.predicates)
        return stmt

    # --- Execution ---

    async def fetch(self, db: AsyncSession) -> Sequence[T]:
        """
        Execute query and return results as model instances.

        Example:
            >>> posts = await Post.objects.all().fetch(db)
        """
        result = await db.execute(self.statement())
        return result.scalars().all()

    async def first(self, db: AsyncSession) -> T | None:
        result = await db.execute(self.limit(1).statement())
        return result.scalars().first()

    async def count(self, db: AsyncSession) -> int:
        """
        Return the number of rows matching the predicates.

        Ordering, limit and offset never influence the count.
        """
        return await db.scalar(self.count_statement()) or 0

    async def exists(self, db: AsyncSession) -> bool:
        return await self.count(db) > 0

    async def paginate(self, db: AsyncSession, *, page: int, limit: int) -> Page[T]:
        """
        Count the full match set, then fetch one page of it.

        Args:
            page: 1-indexed page number, must be >= 1.
            limit: Page size, must be >= 1.

        Raises:
            ValueError: If ``page`` or ``limit`` is below 1.

        Example:
            >>> page = await Post.objects.all().paginate(db, page=2, limit=10)
            >>> page.total, len(page.items)
        """
        if page < 1:
            msg = f"page must be >= 1, got {page}"
            raise ValueError(msg)
        if limit < 1:
            msg = f"limit must be >= 1, got {limit}"
            raise ValueError(msg)

        total = await self.count(db)
        items = await self.limit(limit).offset((page - 1) * limit).fetch(db)
        return Page(items=items, total=total, page=page, limit=limit)
