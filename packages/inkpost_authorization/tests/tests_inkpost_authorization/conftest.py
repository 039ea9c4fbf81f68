import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient
from inkpost_authentication.hasher import hash_password
from inkpost_authentication.models import Role, User
from inkpost_authentication.schemas import AuthenticatedUser
from inkpost_authentication.tokens import create_access_token
from inkpost_authorization import auth_required, permission_dependency, require_admin
from inkpost_authorization.permissions import BasePermission, IsAuthenticated
from inkpost_core.config import InkpostSettings
from inkpost_db import Database


class SafeMethodsOnly(BasePermission):
    async def has_permission(self, request, user) -> bool:
        return request.method in ("GET", "HEAD", "OPTIONS")


@pytest.fixture()
def settings() -> InkpostSettings:
    return InkpostSettings(
        _env_file=None, SECRET_KEY="authorization-test-secret-key-long-enough"
    )


@pytest_asyncio.fixture()
async def database(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'authz.db'}")
    await database.create_all()

    yield database

    await database.close()


@pytest_asyncio.fixture()
async def tokens(database, settings) -> dict[str, dict[str, str]]:
    """Bearer headers for one plain user and one admin."""
    headers = {}
    async with database.session() as db:
        for username, role in [("reader", Role.USER), ("boss", Role.ADMIN)]:
            user = await User.objects.create(
                db,
                username=username,
                email=f"{username}@example.com",
                password_hash=hash_password("password123"),
                role=role,
            )
            token = create_access_token(
                user_id=user.id,
                username=user.username,
                role=user.role.value,
                settings=settings,
            )
            headers[role.value] = {"Authorization": f"Bearer {token}"}
    return headers


@pytest.fixture()
def app(settings, database) -> FastAPI:
    app = FastAPI()
    app.state.settings = settings
    app.state.database = database

    @app.get("/members")
    async def members(user: AuthenticatedUser = Depends(auth_required)):
        return {"user": user.username}

    @app.get("/admin")
    async def admin(user: AuthenticatedUser = Depends(require_admin)):
        return {"user": user.username}

    read_only = permission_dependency([IsAuthenticated(), SafeMethodsOnly()])

    @app.get("/archive")
    async def archive_read(user: AuthenticatedUser = Depends(read_only)):
        return {"ok": True}

    @app.post("/archive")
    async def archive_write(user: AuthenticatedUser = Depends(read_only)):
        return {"ok": True}

    return app


@pytest_asyncio.fixture()
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
