"""
Core Pydantic schemas shared across modules.
"""

import math

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PaginationMeta(BaseModel):
    """
    Pagination block returned next to every list payload.

    Serialized with camelCase keys (``currentPage``, ``totalPages``, ...).

    Example:
        >>> meta = PaginationMeta.build(page=2, limit=10, total=25)
        >>> meta.total_pages, meta.has_next, meta.has_prev
        (3, True, True)
        >>> meta.model_dump(by_alias=True)
        {
            'currentPage': 2,
            'totalPages': 3,
            'totalPosts': 25,
            'hasNext': True,
            'hasPrev': True
        }
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_page: int = Field(..., description="Page that was requested")
    total_pages: int = Field(..., description="ceil(total / limit)")
    total_posts: int = Field(..., description="Rows matching the filters")
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = math.ceil(total / limit) if limit > 0 else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_posts=total,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class MessageResponse(BaseModel):
    message: str
