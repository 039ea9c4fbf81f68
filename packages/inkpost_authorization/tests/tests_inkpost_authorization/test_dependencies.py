import pytest


class TestAuthRequired:
    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, client):
        response = await client.get("/members")

        assert response.status_code == 401
        assert response.json()["detail"] == "No token, authorization denied"

    @pytest.mark.asyncio
    async def test_any_role_passes(self, client, tokens):
        for role in ("user", "admin"):
            response = await client.get("/members", headers=tokens[role])
            assert response.status_code == 200


class TestRequireAdmin:
    @pytest.mark.asyncio
    async def test_missing_token_is_401_not_403(self, client):
        response = await client.get("/admin")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self, client):
        response = await client.get(
            "/admin", headers={"Authorization": "Bearer forged.token.value"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Token is not valid"

    @pytest.mark.asyncio
    async def test_plain_user_is_403(self, client, tokens):
        response = await client.get("/admin", headers=tokens["user"])

        assert response.status_code == 403
        assert (
            response.json()["detail"]
            == "You do not have permission to perform this action"
        )

    @pytest.mark.asyncio
    async def test_admin_passes(self, client, tokens):
        response = await client.get("/admin", headers=tokens["admin"])

        assert response.status_code == 200
        assert response.json() == {"user": "boss"}


class TestCombinedPermissions:
    @pytest.mark.asyncio
    async def test_all_permissions_must_pass(self, client, tokens):
        read = await client.get("/archive", headers=tokens["user"])
        write = await client.post("/archive", headers=tokens["user"])

        assert read.status_code == 200
        assert write.status_code == 403
