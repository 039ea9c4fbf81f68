import pytest
from inkpost_authentication.tokens import create_access_token


class TestGetCurrentUser:
    @pytest.mark.asyncio
    async def test_no_header_is_401(self, client):
        response = await client.get("/whoami")

        assert response.status_code == 401
        assert response.json()["detail"] == "No token, authorization denied"
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self, client):
        response = await client.get(
            "/whoami", headers={"Authorization": "Bearer nonsense"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Token is not valid"

    @pytest.mark.asyncio
    async def test_wrong_scheme_is_treated_as_missing(self, client):
        response = await client.get("/whoami", headers={"Authorization": "Basic abc"})

        assert response.status_code == 401
        assert response.json()["detail"] == "No token, authorization denied"

    @pytest.mark.asyncio
    async def test_valid_token_resolves_user(self, client, settings, test_user):
        token = create_access_token(
            user_id=test_user.id,
            username=test_user.username,
            role=test_user.role.value,
            settings=settings,
        )
        response = await client.get(
            "/whoami", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": test_user.id,
            "username": "testuser",
            "role": "user",
        }
