from inkpost_db.exceptions import IntegrityViolationError


class DuplicateSlugError(IntegrityViolationError):
    """Raised when a post write collides with an existing slug."""

    def __init__(self, slug: str):
        super().__init__("Slug already exists", constraint="posts.slug")
        self.slug = slug
