import logging
import time
import uuid
from typing import Any, Final

from inkpost_core.config import InkpostSettings
from inkpost_core.logging import bind_request_id, unbind_request_id
from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .handlers import server_error_response
from .ratelimit import API_LIMIT_MESSAGE, RateLimiter, client_address

logger = logging.getLogger("inkpost.access")

REQUEST_ID_HEADER = "X-Request-ID"

SECURITY_HEADERS: Final[dict[str, str]] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": (
        "default-src 'self'; style-src 'self' 'unsafe-inline'; "
        "script-src 'self'; img-src 'self' data: https:"
    ),
}


class RequestContextMiddleware:
    """
    Tag each HTTP request with a request id and log one line per request.

    The id is taken from an incoming ``X-Request-ID`` header when present and
    is echoed back on the response.
    """

    def __init__(self, app: ASGIApp, *, enable_request_id: bool = True):
        self.app: Final[ASGIApp] = app
        self.enable_request_id = enable_request_id

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = None
        if self.enable_request_id:
            for key, value in scope.get("headers", []):
                if key.decode("latin-1").lower() == REQUEST_ID_HEADER.lower():
                    request_id = value.decode("latin-1")
                    break
            request_id = request_id or uuid.uuid4().hex

        token = bind_request_id(request_id) if request_id else None
        started = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                if request_id:
                    MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "%s %s -> %s (%.1f ms)",
                scope["method"],
                scope["path"],
                status_code,
                duration_ms,
            )
            if token is not None:
                unbind_request_id(token)


class SecurityHeadersMiddleware:
    """Add conservative browser security headers to every HTTP response."""

    def __init__(self, app: ASGIApp, headers: dict[str, str] | None = None):
        self.app: Final[ASGIApp] = app
        self.headers = dict(SECURITY_HEADERS if headers is None else headers)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> Any:
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = MutableHeaders(scope=message)
                for name, value in self.headers.items():
                    response_headers.setdefault(name, value)
            await send(message)

        return await self.app(scope, receive, send_wrapper)



class RateLimitMiddleware:
    """Answer 429 once a client spends its budget on paths under ``prefix``."""

    def __init__(self, app: ASGIApp, *, limiter: RateLimiter, prefix: str = "/api/"):
        self.app: Final[ASGIApp] = app
        self.limiter = limiter
        self.prefix = prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not scope["path"].startswith(self.prefix):
            await self.app(scope, receive, send)
            return

        key = client_address(Request(scope))
        if self.limiter.hit(key):
            await self.app(scope, receive, send)
            return

        logger.warning("Rate limit reached for %s on %s", key, scope["path"])
        response = JSONResponse(
            status_code=429,
            content={"message": API_LIMIT_MESSAGE},
            headers={"Retry-After": str(self.limiter.retry_after(key))},
        )
        await response(scope, receive, send)


class UnhandledErrorMiddleware:
    """
    Turn an exception escaping the routes into the JSON 500 body.

    Installed innermost, so the outer middleware still tags the response with
    the request id and security headers. An exception raised after the
    response has started is re-raised.
    """

    def __init__(self, app: ASGIApp, *, settings: InkpostSettings):
        self.app: Final[ASGIApp] = app
        self.settings = settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if started:
                raise
            response = server_error_response(Request(scope), exc, self.settings)
            await response(scope, receive, send)
