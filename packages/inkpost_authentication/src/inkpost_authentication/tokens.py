"""
Signed bearer tokens (JWT).

The token carries the user id in ``sub`` plus informational ``username`` and
``role`` claims. Only the signature, the expiry and ``sub`` are trusted; the
role is re-read from the database on every request.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

import jwt
from jwt import InvalidTokenError

__all__ = [
    "InvalidTokenError",
    "TokenSettings",
    "create_access_token",
    "decode_access_token",
    "subject_user_id",
]


class TokenSettings(Protocol):
    ALGORITHM: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int

    @property
    def signing_key(self) -> str: ...


def create_access_token(
    *,
    user_id: int,
    username: str,
    role: str,
    settings: TokenSettings,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Issue a signed access token.

    >>> token = create_access_token(
    ...     user_id=1, username="alice", role="admin", settings=settings
    ... )
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.signing_key, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, settings: TokenSettings) -> dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        InvalidTokenError: Bad signature, expired, malformed, or missing
            ``sub``/``exp``.
    """
    return jwt.decode(
        token,
        settings.signing_key,
        algorithms=[settings.ALGORITHM],
        options={"require": ["exp", "sub"]},
    )


def subject_user_id(claims: dict[str, Any]) -> int:
    """
    Read the user id out of ``sub``.

    Raises:
        InvalidTokenError: If ``sub`` is not an integer id.
    """
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError) as e:
        msg = "Token subject is not a user id"
        raise InvalidTokenError(msg) from e
