class InkpostDBError(Exception):
    """Base class for all Inkpost DB exceptions."""


class DoesNotExistError(InkpostDBError, LookupError):
    """Raised when a single object was expected but none was found."""

    def __init__(self, message: str, *, model_name: str = "Object"):
        super().__init__(message)
        self.model_name = model_name


class MultipleObjectsReturnedError(InkpostDBError, LookupError):
    """Raised when a single object was expected but multiple were found."""


class IntegrityViolationError(InkpostDBError):
    """Raised when a write breaks a unique or foreign key constraint."""

    def __init__(self, message: str, *, constraint: str | None = None):
        super().__init__(message)
        self.constraint = constraint


class DatabaseError(InkpostDBError):
    """Raised for any other failure reported by the database layer."""
