import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient
from inkpost_authentication.dependencies import get_current_user
from inkpost_authentication.hasher import hash_password
from inkpost_authentication.models import Role, User
from inkpost_authentication.schemas import AuthenticatedUser
from inkpost_core.config import InkpostSettings
from inkpost_db import Database

TEST_SECRET = "test-signing-secret-with-plenty-of-length"
TEST_PASSWORD = "password123"


@pytest.fixture()
def settings() -> InkpostSettings:
    return InkpostSettings(_env_file=None, SECRET_KEY=TEST_SECRET)


@pytest_asyncio.fixture()
async def database(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}")
    await database.create_all()

    yield database

    await database.close()


@pytest_asyncio.fixture()
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture()
async def test_user(db_session) -> User:
    return await User.objects.create(
        db_session,
        username="testuser",
        email="test@example.com",
        password_hash=hash_password(TEST_PASSWORD),
    )


@pytest_asyncio.fixture()
async def admin_user(db_session) -> User:
    return await User.objects.create(
        db_session,
        username="admin",
        email="admin@example.com",
        password_hash=hash_password(TEST_PASSWORD),
        role=Role.ADMIN,
    )


@pytest.fixture()
def app(settings, database) -> FastAPI:
    app = FastAPI()
    app.state.settings = settings
    app.state.database = database

    @app.get("/whoami")
    async def whoami(user: AuthenticatedUser = Depends(get_current_user)):
        return {"id": user.id, "username": user.username, "role": user.role}

    return app


@pytest_asyncio.fixture()
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
