import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .models import Model

logger = logging.getLogger(__name__)


def normalize_database_url(database_url: str) -> str:
    """
    Map plain PostgreSQL URLs onto the asyncpg driver.

    >>> normalize_database_url("postgresql://u:p@db/blog")
    'postgresql+asyncpg://u:p@db/blog'
    """
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    Enable SQLite foreign key enforcement for every DBAPI connection.
    """

    @event.listens_for(engine.sync_engine.pool, "connect")  # pragma: no cover
    def _set_sqlite_pragma(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Database:
    """
    Process-scoped handle over the async engine, its bounded connection pool
    and the session factory.

    Built once at startup, shared by every request through ``app.state``,
    disposed at shutdown.

    Example:
        >>> database = Database("sqlite+aiosqlite:///blog.db")
        >>> async with database.session() as db:
        ...     await db.execute(...)
        >>> await database.close()
    """

    def __init__(
        self,
        database_url: str,
        *,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 0,
        pool_timeout: float = 2.0,
        pool_recycle: int = 1800,
        **engine_kwargs: Any,
    ) -> None:
        self.url = normalize_database_url(database_url)
        is_sqlite = self.url.startswith("sqlite")

        options: dict[str, Any] = {"echo": echo, **engine_kwargs}

        if is_sqlite:
            # SQLite does not support pooling options
            options.setdefault("connect_args", {"check_same_thread": False})
        else:
            options.setdefault("pool_pre_ping", True)
            options.setdefault("pool_size", pool_size)
            options.setdefault("max_overflow", max_overflow)
            options.setdefault("pool_timeout", pool_timeout)
            options.setdefault("pool_recycle", pool_recycle)

        self.engine: AsyncEngine = create_async_engine(self.url, **options)

        if is_sqlite:
            _enable_sqlite_foreign_keys(self.engine)

        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Any, **engine_kwargs: Any) -> "Database":
        return cls(
            settings.DATABASE_URL,
            echo=settings.DB_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            **engine_kwargs,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session bound to a pooled connection.

        The connection goes back to the pool when the block exits, whatever
        the outcome.
        """
        async with self.session_factory() as session:
            yield session

    async def create_all(self) -> None:
        """
        Create every table and index registered on ``Model.metadata``.

        Existing tables are left untouched.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Model.metadata.create_all)
        logger.info("Database tables initialized")

    async def ping(self) -> bool:
        """Round-trip ``SELECT 1``; False when the database is unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError):
            logger.exception("Database ping failed")
            return False
        return True

    async def close(self) -> None:
        """
        Dispose of the engine and close pooled connections.
        """
        await self.engine.dispose()
        logger.info("Database pool closed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a session from the application's database.

    Example:
        >>> @router.get("/")
        ... async def view(db: AsyncSession = Depends(get_db)): ...
    """
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        msg = "Database not initialized. Set app.state.database first."
        raise RuntimeError(msg)
    async with database.session() as session:
        yield session
