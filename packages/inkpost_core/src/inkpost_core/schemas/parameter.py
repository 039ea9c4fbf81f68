from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from inkpost_core.config import inkpost_settings

# Keeps (page - 1) * limit inside a 64-bit OFFSET
MAX_PAGE = 1_000_000


class PaginationParams(BaseModel):
    """
    Page, page size and free-text search for list endpoints.

    ``page`` outside 1..``MAX_PAGE`` and ``limit`` below 1 are rejected;
    ``limit`` above the configured maximum is clamped to it.

    Examples
    --------
    Page-based offset calculation::

        >>> params = PaginationParams(page=3, limit=10)
        >>> params.get_offset()
        20

    Blank search terms are treated as absent::

        >>> PaginationParams(search="   ").search is None
        True
    """

    model_config = ConfigDict(
        populate_by_name=True,
        # Unknown query params must not fail validation
        extra="ignore",
    )

    page: Annotated[
        int, Field(default=1, ge=1, le=MAX_PAGE, description="1-indexed page number")
    ]

    limit: Annotated[
        int,
        Field(
            default=inkpost_settings.DEFAULT_LIST_PER_PAGE,
            ge=1,
            description="Items per page",
        ),
    ]

    search: Annotated[
        str | None,
        Field(default=None, description="Case-insensitive title/content match"),
    ]

    max_limit: Annotated[int, Field(default=inkpost_settings.MAX_API_LIMIT, exclude=True)]

    @field_validator("search")
    @classmethod
    def _normalize_search(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @model_validator(mode="after")
    def _clamp_limit(self) -> Self:
        """
        >>> PaginationParams(limit=9999, max_limit=100).limit
        100
        """
        self.limit = min(self.limit, self.max_limit)
        return self

    def get_offset(self) -> int:
        """
        >>> PaginationParams(page=2, limit=20).get_offset()
        20
        """
        return (self.page - 1) * self.limit
