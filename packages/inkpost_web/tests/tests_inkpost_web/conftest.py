import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from inkpost_authentication.hasher import hash_password
from inkpost_authentication.models import Role, User
from inkpost_authentication.tokens import create_access_token
from inkpost_core.config import InkpostSettings
from inkpost_db import Database
from inkpost_web import create_app

TEST_PASSWORD = "password123"


@pytest.fixture()
def settings() -> InkpostSettings:
    return InkpostSettings(
        _env_file=None,
        SECRET_KEY="web-test-secret-key-that-is-long-enough",
        FRONTEND_URL="http://localhost:5173",
    )


@pytest_asyncio.fixture()
async def database(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'web.db'}")
    # ASGITransport does not run the lifespan, so tables are created here
    await database.create_all()

    yield database

    await database.close()


@pytest.fixture()
def app(settings, database):
    return create_app(settings=settings, database=database)


@pytest_asyncio.fixture()
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


async def _create_user(database, settings, username: str, role: Role):
    async with database.session() as db:
        user = await User.objects.create(
            db,
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password(TEST_PASSWORD),
            role=role,
        )
    token = create_access_token(
        user_id=user.id, username=user.username, role=role.value, settings=settings
    )
    return user, {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture()
async def admin_headers(database, settings) -> dict[str, str]:
    _, headers = await _create_user(database, settings, "admin", Role.ADMIN)
    return headers


@pytest_asyncio.fixture()
async def user_headers(database, settings) -> dict[str, str]:
    _, headers = await _create_user(database, settings, "reader", Role.USER)
    return headers


@pytest.fixture()
def post_payload() -> dict:
    return {
        "title": "My First Post",
        "content": "Hello from the blog.",
        "excerpt": "Hello",
        "author": "Jane",
        "published": True,
    }
