import pytest
import pytest_asyncio
from inkpost_blog import PostCreate, PostService
from inkpost_db import Database


@pytest_asyncio.fixture()
async def database(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}")
    await database.create_all()

    yield database

    await database.close()


@pytest_asyncio.fixture()
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest.fixture()
def service() -> PostService:
    return PostService()


@pytest.fixture()
def make_post(db_session, service):
    """Create a post with sensible defaults; keyword arguments override them."""

    async def _make(**overrides):
        data = {
            "title": "A Post",
            "content": "Some content",
            "author": "Jane",
            "published": True,
        }
        data.update(overrides)
        return await service.create(db_session, PostCreate(**data))

    return _make
