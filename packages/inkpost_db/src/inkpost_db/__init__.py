from .db import Database, get_db, normalize_database_url
from .exceptions import (
    DatabaseError,
    DoesNotExistError,
    InkpostDBError,
    IntegrityViolationError,
    MultipleObjectsReturnedError,
)
from .models import CreatedAtMixin, Model, TimestampMixin
from .queryset import Page, QuerySet

__all__ = [
    "CreatedAtMixin",
    "Database",
    "DatabaseError",
    "DoesNotExistError",
    "InkpostDBError",
    "IntegrityViolationError",
    "Model",
    "MultipleObjectsReturnedError",
    "Page",
    "QuerySet",
    "TimestampMixin",
    "get_db",
    "normalize_database_url",
]
