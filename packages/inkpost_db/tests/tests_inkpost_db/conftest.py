import pytest_asyncio
from inkpost_db import Database

from .models import Article  # noqa: F401  (registers the test table)


@pytest_asyncio.fixture()
async def database(tmp_path):
    """A fresh SQLite database file per test, tables created."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await database.create_all()

    yield database

    await database.close()


@pytest_asyncio.fixture()
async def db_session(database):
    """Provide a database session for tests."""
    async with database.session() as session:
        yield session
