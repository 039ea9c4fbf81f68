from .backend import AuthenticationBackend, TokenAuthenticationBackend
from .models import Role, User
from .schemas import (
    AnonymousUser,
    AuthenticatedUser,
    AuthenticationResult,
    LoginSchema,
    TokenResponse,
)

__all__ = [
    "AnonymousUser",
    "AuthenticatedUser",
    "AuthenticationBackend",
    "AuthenticationResult",
    "LoginSchema",
    "Role",
    "TokenAuthenticationBackend",
    "TokenResponse",
    "User",
]
