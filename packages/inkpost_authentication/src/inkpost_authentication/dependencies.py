import logging
from typing import cast

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from inkpost_core.config import InkpostSettings
from inkpost_core.dependencies import get_settings
from inkpost_db import get_db
from sqlalchemy.ext.asyncio import AsyncSession

from .backend import TokenAuthenticationBackend
from .schemas import AnonymousUser, AuthenticatedUser

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="JWT access token")


def get_authentication_backend(
    settings: InkpostSettings = Depends(get_settings),
) -> TokenAuthenticationBackend:
    return TokenAuthenticationBackend(settings)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    backend: TokenAuthenticationBackend = Depends(get_authentication_backend),
) -> AuthenticatedUser:
    """
    Resolve ``Authorization: Bearer <token>`` into the requesting user.

    Raises 401 when the token is missing, invalid, expired, or names a user
    that no longer exists. On success the identity is also stored on
    ``request.state.user`` for downstream handlers.
    """
    request.state.user = AnonymousUser()
    token = credentials.credentials if credentials else None

    result = await backend.authenticate(db, token)
    if not result.success:
        logger.warning(
            "Rejected %s %s: %s (%s)",
            request.method,
            request.url.path,
            result.message,
            "; ".join(result.errors),
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = cast("AuthenticatedUser", result.user)
    request.state.user = user
    return user
