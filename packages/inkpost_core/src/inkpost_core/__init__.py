from .config import InkpostSettings, inkpost_settings
from .schemas.parameter import PaginationParams
from .schemas.response import MessageResponse, PaginationMeta

__all__ = [
    "InkpostSettings",
    "MessageResponse",
    "PaginationMeta",
    "PaginationParams",
    "inkpost_settings",
]
