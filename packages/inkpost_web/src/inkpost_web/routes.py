from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from inkpost_authentication.backend import TokenAuthenticationBackend
from inkpost_authentication.dependencies import (
    get_authentication_backend,
    get_current_user,
)
from inkpost_authentication.schemas import (
    AuthenticatedUser,
    LoginSchema,
    TokenResponse,
)
from inkpost_core.config import InkpostSettings
from inkpost_core.dependencies import get_settings
from inkpost_db import Database, get_db
from sqlalchemy.ext.asyncio import AsyncSession

from .ratelimit import LOGIN_LIMIT_MESSAGE, RateLimiter, client_address

health_router = APIRouter(prefix="/api", tags=["health"])
auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


@health_router.get("/health")
async def health(
    request: Request,
    settings: InkpostSettings = Depends(get_settings),
) -> JSONResponse:
    """Liveness plus database reachability."""
    database: Database = request.app.state.database
    connected = await database.ping()
    body = {
        "status": "OK" if connected else "ERROR",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if connected else "disconnected",
        "environment": settings.ENVIRONMENT,
    }
    return JSONResponse(
        status_code=(
            status.HTTP_200_OK if connected else status.HTTP_503_SERVICE_UNAVAILABLE
        ),
        content=body,
    )


@auth_router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    payload: LoginSchema,
    db: AsyncSession = Depends(get_db),
    backend: TokenAuthenticationBackend = Depends(get_authentication_backend),
) -> TokenResponse:
    """Exchange credentials for a token. Only failures count against the limit."""
    limiter: RateLimiter | None = request.app.state.login_limiter
    key = client_address(request)
    if limiter is not None and not limiter.allows(key):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=LOGIN_LIMIT_MESSAGE,
            headers={"Retry-After": str(limiter.retry_after(key))},
        )

    result = await backend.login(
        db, username=payload.username, password=payload.password
    )
    if not result.success:
        if limiter is not None:
            limiter.hit(key)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.message,
        )
    return TokenResponse(
        token=result.extra["access_token"],
        user=result.user,
    )


@auth_router.get("/me", response_model=AuthenticatedUser)
async def me(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    return user
