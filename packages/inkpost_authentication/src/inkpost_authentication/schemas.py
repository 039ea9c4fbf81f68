from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .models import Role


class AuthenticatedUser(BaseModel):
    """Identity attached to a request once its bearer token checks out."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class AnonymousUser(BaseModel):
    id: None = None
    username: str = ""
    role: None = None

    @property
    def is_authenticated(self) -> bool:
        """Anonymous users are never authenticated."""
        return False

    @property
    def is_admin(self) -> bool:
        return False

    def __bool__(self) -> bool:
        """AnonymousUser is falsy in boolean context."""
        return False


class AuthenticationResult(BaseModel):
    """Result from an authentication backend.

    Attributes:
        success: Whether authentication succeeded.
        user: Authenticated identity or AnonymousUser.
        message: Human-readable status message, safe to return to clients.
        errors: Error details for logging; never sent to clients.
        extra: Extra data from the backend (issued token, claims, ...).

    """

    success: bool
    user: AuthenticatedUser | AnonymousUser
    message: str = ""
    errors: list[str] = Field(default_factory=list)
    extra: dict[str, Any] = Field(default_factory=dict)

    def __repr__(self) -> str:
        return f"<AuthenticationResult success={self.success} user={self.user!r}>"


class LoginSchema(BaseModel):
    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: AuthenticatedUser

