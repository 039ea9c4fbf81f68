from .exceptions import DuplicateSlugError
from .models import Post
from .routes import router
from .schemas import PostCreate, PostListResponse, PostRead, PostUpdate
from .service import PostService
from .slugs import is_url_safe, slugify, unique_slug

__all__ = [
    "DuplicateSlugError",
    "Post",
    "PostCreate",
    "PostListResponse",
    "PostRead",
    "PostService",
    "PostUpdate",
    "is_url_safe",
    "router",
    "slugify",
    "unique_slug",
]
