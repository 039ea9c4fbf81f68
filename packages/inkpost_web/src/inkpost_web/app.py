from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from inkpost_blog.routes import router as posts_router
from inkpost_core.config import InkpostSettings, inkpost_settings
from inkpost_db import Database

from .handlers import register_exception_handlers
from .middleware import (
    RateLimitMiddleware,
    RequestContextMiddleware,
    SecurityHeadersMiddleware,
    UnhandledErrorMiddleware,
)
from .ratelimit import RateLimiter
from .routes import auth_router, health_router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


def create_app(
    settings: InkpostSettings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """
    Build the Inkpost API.

    The database handle is created here (or injected, in tests), stored on
    ``app.state.database`` and disposed when the lifespan ends.

    Example:
        >>> app = create_app()
        >>> # uvicorn "inkpost_web.app:create_app" --factory
    """
    settings = settings or inkpost_settings
    database = database or Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await database.create_all()
        logger.info(
            "Inkpost started (environment=%s, database=%s)",
            settings.ENVIRONMENT,
            database.engine.url.render_as_string(hide_password=True),
        )
        yield
        await database.close()

    app = FastAPI(
        title="Inkpost",
        description="Personal blog API: posts, search and an admin panel back end",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.login_limiter = None

    # The middleware added last runs first, so request ids cover CORS rejections,
    # throttled requests and 500s too
    app.add_middleware(UnhandledErrorMiddleware, settings=settings)
    app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MINIMUM_SIZE)
    if settings.RATE_LIMIT_ENABLED:
        app.add_middleware(
            RateLimitMiddleware,
            limiter=RateLimiter(settings.RATE_LIMIT_API, namespace="api"),
        )
        app.state.login_limiter = RateLimiter(
            settings.RATE_LIMIT_LOGIN, namespace="login"
        )
    app.add_middleware(SecurityHeadersMiddleware)
    if settings.ENABLE_CORS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins(),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(
        RequestContextMiddleware, enable_request_id=settings.ENABLE_REQUEST_ID
    )

    register_exception_handlers(app, settings)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(posts_router)
    return app
