from datetime import datetime

from inkpost_core.schemas import PaginationMeta
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from .slugs import SLUG_MAX_LENGTH, is_url_safe

_REQUIRED_MESSAGES = {
    "title": "Title is required",
    "content": "Content is required",
    "author": "Author is required",
}


class PostWrite(BaseModel):
    """Body accepted by both create and update; update is a full replace."""

    model_config = ConfigDict(extra="ignore")

    # Defaults of None let a missing field report the same message as a blank one
    title: str = Field(default=None, max_length=255, validate_default=True)
    content: str = Field(default=None, validate_default=True)
    author: str = Field(default=None, max_length=100, validate_default=True)
    excerpt: str | None = None
    slug: str | None = Field(default=None, max_length=SLUG_MAX_LENGTH)
    published: bool = False

    @field_validator("title", "content", "author", mode="before")
    @classmethod
    def _require_text(cls, v: object, info) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise PydanticCustomError("required", _REQUIRED_MESSAGES[info.field_name])
        return v

    @field_validator("slug")
    @classmethod
    def _check_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if not is_url_safe(v):
            raise PydanticCustomError(
                "slug_format",
                "Slug may only contain lowercase letters, digits and single hyphens",
            )
        return v


class PostCreate(PostWrite):
    pass


class PostUpdate(PostWrite):
    pass


class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    excerpt: str | None
    slug: str
    author: str
    published: bool
    created_at: datetime
    updated_at: datetime


class PostListResponse(BaseModel):
    posts: list[PostRead]
    pagination: PaginationMeta
