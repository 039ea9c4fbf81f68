from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from inkpost_core.schemas import PaginationMeta, PaginationParams
from inkpost_db.exceptions import IntegrityViolationError
from sqlalchemy import or_

from .exceptions import DuplicateSlugError
from .models import Post
from .schemas import PostListResponse, PostRead, PostWrite
from .slugs import unique_slug

if TYPE_CHECKING:
    from inkpost_db.queryset import QuerySet
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql import ColumnElement

logger = logging.getLogger(__name__)


def search_predicate(term: str | None) -> ColumnElement[bool] | None:
    """
    ``title`` or ``content`` contains ``term``, ignoring case.

    LIKE wildcards inside the term are escaped, so ``100%`` matches the
    literal text. Returns None for an absent or blank term.
    """
    if term is None or not term.strip():
        return None
    term = term.strip()
    return or_(
        Post.title.icontains(term, autoescape=True),
        Post.content.icontains(term, autoescape=True),
    )


def listing_queryset(
    *, search: str | None = None, published_only: bool = True
) -> QuerySet[Post]:
    """
    Filtered, newest-first post query. Pagination is applied by the caller.
    """
    qs = Post.objects.filter(
        Post.published.is_(True) if published_only else None,
        search_predicate(search),
    )
    return qs.order_by(Post.created_at.desc(), Post.id.desc())


class PostService:
    """Post reads and writes, shared by the HTTP routes and the CLI."""

    async def list_posts(
        self,
        db: AsyncSession,
        params: PaginationParams,
        *,
        published_only: bool = True,
    ) -> PostListResponse:
        qs = listing_queryset(search=params.search, published_only=published_only)
        page = await qs.paginate(db, page=params.page, limit=params.limit)
        return PostListResponse(
            posts=[PostRead.model_validate(p) for p in page.items],
            pagination=PaginationMeta.build(
                page=page.page, limit=page.limit, total=page.total
            ),
        )

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Post:
        return await Post.objects.get(db, Post.slug == slug)

    async def create(self, db: AsyncSession, data: PostWrite) -> Post:
        fields = self._fields(data)
        try:
            post = await Post.objects.create(db, **fields)
        except IntegrityViolationError as e:
            raise DuplicateSlugError(fields["slug"]) from e
        logger.info("Created post id=%s slug=%s", post.id, post.slug)
        return post

    async def update(self, db: AsyncSession, post_id: int, data: PostWrite) -> Post:
        fields = self._fields(data)
        try:
            post = await Post.objects.update(db, pk=post_id, **fields)
        except IntegrityViolationError as e:
            raise DuplicateSlugError(fields["slug"]) from e
        logger.info("Updated post id=%s slug=%s", post.id, post.slug)
        return post

    async def delete(self, db: AsyncSession, post_id: int) -> None:
        await Post.objects.delete_by_pk(db, post_id, raise_if_missing=True)
        logger.info("Deleted post id=%s", post_id)

    @staticmethod
    def _fields(data: PostWrite) -> dict[str, object]:
        return {
            "title": data.title,
            "content": data.content,
            "excerpt": data.excerpt,
            "slug": data.slug or unique_slug(data.title),
            "author": data.author,
            "published": data.published,
        }
