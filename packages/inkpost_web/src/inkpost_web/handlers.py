"""
Translate exceptions into JSON error responses.

Every error body carries a ``message`` key. Validation failures also carry a
per-field ``errors`` list.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from inkpost_blog.exceptions import DuplicateSlugError
from inkpost_core.config import InkpostSettings
from inkpost_db.exceptions import (
    DoesNotExistError,
    InkpostDBError,
    IntegrityViolationError,
)
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(p) for p in loc if p not in _LOCATION_PREFIXES]
    if not parts:
        return str(loc[0]) if loc else "body"
    return ".".join(parts)


def validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {"field": _field_name(tuple(err.get("loc", ()))), "message": err["msg"]}
        for err in exc.errors()
    ]


def server_error_response(
    request: Request, exc: Exception, settings: InkpostSettings
) -> JSONResponse:
    """Log ``exc`` and build the 500 body; production hides the error text."""
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    message = "An error occurred" if settings.is_production() else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": message or type(exc).__name__, "status": "error"},
    )


def register_exception_handlers(app: FastAPI, settings: InkpostSettings) -> None:

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Validation failed", "errors": validation_errors(exc)},
        )

    @app.exception_handler(DoesNotExistError)
    async def handle_does_not_exist(
        _request: Request, exc: DoesNotExistError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": f"{exc.model_name} not found"},
        )

    @app.exception_handler(IntegrityViolationError)
    async def handle_integrity_violation(
        _request: Request, exc: IntegrityViolationError
    ) -> JSONResponse:
        if isinstance(exc, DuplicateSlugError):
            message = "Slug already exists"
        else:
            message = "Request conflicts with existing data"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": message},
        )

    @app.exception_handler(InkpostDBError)
    async def handle_database_error(request: Request, exc: InkpostDBError):
        return server_error_response(request, exc, settings)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = exc.detail
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = "Route not found"
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        return server_error_response(request, exc, settings)
