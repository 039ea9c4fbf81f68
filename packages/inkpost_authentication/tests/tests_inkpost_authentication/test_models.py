import pytest
from inkpost_authentication.models import Role, User
from inkpost_db import IntegrityViolationError

from .conftest import TEST_PASSWORD


@pytest.mark.asyncio
async def test_default_role_is_user(test_user):
    assert test_user.role == Role.USER
    assert test_user.is_admin is False
    assert test_user.created_at is not None


@pytest.mark.asyncio
async def test_check_password(test_user):
    assert test_user.check_password(TEST_PASSWORD) is True
    assert test_user.check_password("nope") is False


def test_set_password_replaces_hash():
    user = User(username="x", email="x@example.com", password_hash="old")
    user.set_password("fresh-password")

    assert user.password_hash != "old"
    assert user.check_password("fresh-password") is True


@pytest.mark.asyncio
async def test_username_is_unique(db_session, test_user):
    with pytest.raises(IntegrityViolationError):
        await User.objects.create(
            db_session,
            username="testuser",
            email="other@example.com",
            password_hash="x",
        )


@pytest.mark.asyncio
async def test_role_stored_as_plain_string(db_session, admin_user):
    fetched = await User.objects.get(db_session, User.username == "admin")
    assert fetched.role is Role.ADMIN
    assert str(fetched) == "admin"
