from .parameter import MAX_PAGE, PaginationParams
from .response import MessageResponse, PaginationMeta

__all__ = ["MAX_PAGE", "MessageResponse", "PaginationMeta", "PaginationParams"]
