import logging
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from typing_extensions import override

from .hasher import needs_rehash
from .models import User
from .schemas import AnonymousUser, AuthenticatedUser, AuthenticationResult
from .tokens import (
    InvalidTokenError,
    TokenSettings,
    create_access_token,
    decode_access_token,
    subject_user_id,
)

logger = logging.getLogger(__name__)

NO_TOKEN_MESSAGE = "No token, authorization denied"
INVALID_TOKEN_MESSAGE = "Token is not valid"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


class AuthenticationBackend(ABC):
    @abstractmethod
    async def authenticate(self, *arg: Any, **kwargs: Any) -> AuthenticationResult: ...

    @abstractmethod
    async def login(self, *arg: Any, **kwargs: Any) -> AuthenticationResult: ...


class TokenAuthenticationBackend(AuthenticationBackend):
    """Bearer-token authentication backed by the ``users`` table."""

    def __init__(self, settings: TokenSettings):
        self.settings = settings

    @override
    async def authenticate(
        self,
        db: AsyncSession,
        token: str | None,
    ) -> AuthenticationResult:
        """Verify a bearer token and re-load the user it names.

        The user row is fetched on every call so deleted accounts lose access
        immediately and role changes apply without re-issuing tokens.

        Args:
            db (AsyncSession): Database session.
            token (str): The raw token, without the ``Bearer`` prefix.

        Returns:
            AuthenticationResult: Always returns a result object, never raises
            for bad input.

        """
        if not token:
            return AuthenticationResult(
                success=False,
                user=AnonymousUser(),
                message=NO_TOKEN_MESSAGE,
                errors=["Missing bearer token"],
            )

        try:
            claims = decode_access_token(token, self.settings)
            user_id = subject_user_id(claims)
        except InvalidTokenError as e:
            return AuthenticationResult(
                success=False,
                user=AnonymousUser(),
                message=INVALID_TOKEN_MESSAGE,
                errors=[f"{type(e).__name__}: {e}"],
            )

        user = await db.get(User, user_id)
        if user is None:
            return AuthenticationResult(
                success=False,
                user=AnonymousUser(),
                message=INVALID_TOKEN_MESSAGE,
                errors=[f"User {user_id} no longer exists"],
            )

        return AuthenticationResult(
            success=True,
            user=AuthenticatedUser.model_validate(user),
            message="Authenticated",
            extra={"claims": claims},
        )

    @override
    async def login(
        self,
        db: AsyncSession,
        *,
        username: str,
        password: str,
    ) -> AuthenticationResult:
        """Check credentials and issue an access token.

        ``username`` may also be the account email.
        """
        user = None
        if username and password:
            stmt = (
                select(User)
                .where(or_(User.username == username, User.email == username))
                .limit(1)
            )
            candidate = await db.scalar(stmt)
            if candidate is not None and candidate.check_password(password):
                user = candidate

        if user is None:
            logger.warning("Failed login attempt for %r", username)
            return AuthenticationResult(
                success=False,
                user=AnonymousUser(),
                message=INVALID_CREDENTIALS_MESSAGE,
                errors=["Invalid credentials"],
            )

        if needs_rehash(user.password_hash):
            user.set_password(password)
            await db.commit()
            logger.info("Upgraded password hash for %s", user.username)

        identity = AuthenticatedUser.model_validate(user)
        token = create_access_token(
            user_id=identity.id,
            username=identity.username,
            role=identity.role.value,
            settings=self.settings,
        )
        logger.info("User %s logged in", identity.username)
        return AuthenticationResult(
            success=True,
            user=identity,
            message="Login Successful",
            extra={"access_token": token},
        )
