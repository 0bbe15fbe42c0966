"""Test token quota management endpoints.

Covers:
- POST /api/v1/token/update_quota
- POST /api/v1/token/update_quota_by_key
- POST /api/v1/token/add_quota
- POST /api/v1/token/info

Status codes tested:
- 200 OK
- 400 Bad Request (validation)
- 404 Not Found
"""
import pytest
from httpx import AsyncClient

from token_quota.models.user import User
from token_quota.models.token import TokenStatus


@pytest.mark.integration
class TestUpdateTokenQuota:
    """Test POST /api/v1/token/update_quota endpoint."""

    async def test_update_quota_200_overwrites(
        self, client: AsyncClient, user_a: User, create_token
    ):
        """Test that the quota is set, not added, and visible via info."""
        token = await create_token(user_a.id, remain_quota=1200)

        response = await client.post(
            "/api/v1/token/update_quota",
            json={"token_id": token.id, "remain_quota": 500},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Token quota updated successfully"
        assert "data" not in body

        info = await client.post("/api/v1/token/info", json={"api_key": token.key})
        assert info.json()["data"]["remain_quota"] == 500

    async def test_update_quota_to_zero(
        self, client: AsyncClient, user_a: User, create_token, read_token
    ):
        """Test that zero is a valid quota."""
        token = await create_token(user_a.id, remain_quota=10)

        response = await client.post(
            "/api/v1/token/update_quota",
            json={"token_id": token.id, "remain_quota": 0},
        )
        assert response.status_code == 200
        assert (await read_token(token.id)).remain_quota == 0

    @pytest.mark.parametrize("token_id", [0, -3])
    async def test_update_quota_400_invalid_token_id(
        self, client: AsyncClient, token_id: int
    ):
        """Test that non-positive token ids are rejected."""
        response = await client.post(
            "/api/v1/token/update_quota",
            json={"token_id": token_id, "remain_quota": 10},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid token_id: must be greater than 0"

    async def test_update_quota_400_negative_quota(
        self, client: AsyncClient, user_a: User, create_token, read_token
    ):
        """Test that a negative quota is rejected and nothing changes."""
        token = await create_token(user_a.id, remain_quota=10)

        response = await client.post(
            "/api/v1/token/update_quota",
            json={"token_id": token.id, "remain_quota": -1},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid remain_quota: must be >= 0"
        assert (await read_token(token.id)).remain_quota == 10

    async def test_update_quota_404_unknown_id(self, client: AsyncClient):
        """Test that an unknown id returns 404."""
        response = await client.post(
            "/api/v1/token/update_quota",
            json={"token_id": 9999, "remain_quota": 10},
        )
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    async def test_update_quota_400_quota_too_large(
        self, client: AsyncClient, user_a: User, create_token, read_token
    ):
        """Test that a quota beyond the storable range is rejected."""
        token = await create_token(user_a.id, remain_quota=10)

        response = await client.post(
            "/api/v1/token/update_quota",
            json={"token_id": token.id, "remain_quota": 2**70},
        )
        assert response.status_code == 400
        assert response.json()["message"].startswith("Invalid request parameters")
        assert (await read_token(token.id)).remain_quota == 10

    async def test_update_quota_400_token_id_too_large(self, client: AsyncClient):
        """Test that a token id beyond the id column range is rejected."""
        response = await client.post(
            "/api/v1/token/update_quota",
            json={"token_id": 2**40, "remain_quota": 10},
        )
        assert response.status_code == 400


@pytest.mark.integration
class TestUpdateTokenQuotaByKey:
    """Test POST /api/v1/token/update_quota_by_key endpoint."""

    async def test_update_quota_by_key_200(
        self, client: AsyncClient, user_a: User, create_token, read_token
    ):
        """Test that the quota is overwritten by key."""
        token = await create_token(user_a.id, remain_quota=70)

        response = await client.post(
            "/api/v1/token/update_quota_by_key",
            json={"api_key": token.key, "remain_quota": 42},
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Token quota updated successfully"
        assert (await read_token(token.id)).remain_quota == 42

    async def test_update_quota_by_key_accepts_sk_prefix(
        self, client: AsyncClient, user_a: User, create_token, read_token
    ):
        """Test that keys may be given in their sk- display form."""
        token = await create_token(user_a.id, remain_quota=70)

        response = await client.post(
            "/api/v1/token/update_quota_by_key",
            json={"api_key": f"sk-{token.key}", "remain_quota": 7},
        )
        assert response.status_code == 200
        assert (await read_token(token.id)).remain_quota == 7

    async def test_update_quota_by_key_400_missing_key(self, client: AsyncClient):
        """Test that an empty key is rejected."""
        response = await client.post(
            "/api/v1/token/update_quota_by_key",
            json={"remain_quota": 7},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "API key is required"

    @pytest.mark.parametrize("api_key", ["sk-", "   "])
    async def test_update_quota_by_key_400_blank_key(
        self, client: AsyncClient, api_key: str
    ):
        """Test that keys which normalize to nothing are rejected."""
        response = await client.post(
            "/api/v1/token/update_quota_by_key",
            json={"api_key": api_key, "remain_quota": 7},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "API key is required"

    async def test_update_quota_by_key_400_quota_too_large(
        self, client: AsyncClient, user_a: User, create_token, read_token
    ):
        """Test that a quota beyond the storable range is rejected."""
        token = await create_token(user_a.id, remain_quota=70)

        response = await client.post(
            "/api/v1/token/update_quota_by_key",
            json={"api_key": token.key, "remain_quota": 2**63},
        )
        assert response.status_code == 400
        assert (await read_token(token.id)).remain_quota == 70

    async def test_update_quota_by_key_400_negative_quota(
        self, client: AsyncClient, user_a: User, create_token
    ):
        """Test that a negative quota is rejected."""
        token = await create_token(user_a.id)

        response = await client.post(
            "/api/v1/token/update_quota_by_key",
            json={"api_key": token.key, "remain_quota": -100},
        )
        assert response.status_code == 400

    async def test_update_quota_by_key_404_unknown_key(self, client: AsyncClient):
        """Test that an unknown key returns 404."""
        response = await client.post(
            "/api/v1/token/update_quota_by_key",
            json={"api_key": "does-not-exist", "remain_quota": 7},
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Token not found"


@pytest.mark.integration
class TestAddTokenQuota:
    """Test POST /api/v1/token/add_quota endpoint."""

    async def test_add_quota_200_increments(
        self, client: AsyncClient, user_a: User, create_token, read_token
    ):
        """Test that the quota is increased relative to its prior value."""
        token = await create_token(user_a.id, remain_quota=500)

        response = await client.post(
            "/api/v1/token/add_quota",
            json={"api_key": token.key, "add_quota": 300},
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Token quota added successfully"
        assert response.json()["data"] == {"remain_quota": 800}
        assert (await read_token(token.id)).remain_quota == 800

    async def test_add_quota_twice_accumulates(
        self, client: AsyncClient, user_a: User, create_token, read_token
    ):
        """Test that consecutive additions accumulate."""
        token = await create_token(user_a.id, remain_quota=0)

        for _ in range(2):
            response = await client.post(
                "/api/v1/token/add_quota",
                json={"api_key": token.key, "add_quota": 250},
            )
            assert response.status_code == 200

        assert (await read_token(token.id)).remain_quota == 500

    @pytest.mark.parametrize("add_quota", [0, -10])
    async def test_add_quota_400_non_positive(
        self, client: AsyncClient, user_a: User, create_token, read_token, add_quota: int
    ):
        """Test that non-positive additions are rejected and nothing changes."""
        token = await create_token(user_a.id, remain_quota=500)

        response = await client.post(
            "/api/v1/token/add_quota",
            json={"api_key": token.key, "add_quota": add_quota},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid add_quota: must be greater than 0"
        assert (await read_token(token.id)).remain_quota == 500

    async def test_add_quota_400_missing_key(self, client: AsyncClient):
        """Test that an empty key is rejected."""
        response = await client.post(
            "/api/v1/token/add_quota",
            json={"api_key": "", "add_quota": 10},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "API key is required"

    @pytest.mark.parametrize("api_key", ["sk-", "   "])
    async def test_add_quota_400_blank_key(self, client: AsyncClient, api_key: str):
        """Test that keys which normalize to nothing are rejected."""
        response = await client.post(
            "/api/v1/token/add_quota",
            json={"api_key": api_key, "add_quota": 10},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "API key is required"

    async def test_add_quota_400_overflow(
        self, client: AsyncClient, user_a: User, create_token, read_token
    ):
        """Test that an increment past the largest storable quota is rejected."""
        token = await create_token(user_a.id, remain_quota=2**63 - 10)

        response = await client.post(
            "/api/v1/token/add_quota",
            json={"api_key": token.key, "add_quota": 100},
        )
        assert response.status_code == 400
        assert response.json()["message"].startswith("Invalid add_quota")
        assert (await read_token(token.id)).remain_quota == 2**63 - 10

    async def test_add_quota_404_unknown_key(self, client: AsyncClient):
        """Test that an unknown key returns 404."""
        response = await client.post(
            "/api/v1/token/add_quota",
            json={"api_key": "does-not-exist", "add_quota": 10},
        )
        assert response.status_code == 404

    async def test_add_quota_leaves_used_quota_alone(
        self, client: AsyncClient, user_a: User, create_token, read_token
    ):
        """Test that quota operations never touch used_quota."""
        token = await create_token(user_a.id, remain_quota=10, used_quota=90)

        await client.post(
            "/api/v1/token/add_quota",
            json={"api_key": token.key, "add_quota": 5},
        )
        stored = await read_token(token.id)
        assert stored.remain_quota == 15
        assert stored.used_quota == 90


@pytest.mark.integration
class TestGetTokenInfo:
    """Test POST /api/v1/token/info endpoint."""

    async def test_get_token_info_200(
        self, client: AsyncClient, user_a: User, create_token
    ):
        """Test that the read-only projection is returned."""
        token = await create_token(
            user_a.id, remain_quota=321, used_quota=12, name="billing"
        )

        response = await client.post("/api/v1/token/info", json={"api_key": token.key})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Token information retrieved successfully"
        assert body["data"] == {
            "token_id": token.id,
            "name": "billing",
            "remain_quota": 321,
            "used_quota": 12,
            "created_time": token.created_time,
            "expired_time": -1,
            "group": "default",
            "status": TokenStatus.ENABLED,
        }

    async def test_get_token_info_does_not_expose_key(
        self, client: AsyncClient, user_a: User, create_token
    ):
        """Test that the secret key is never echoed back."""
        token = await create_token(user_a.id)

        response = await client.post("/api/v1/token/info", json={"api_key": token.key})
        assert "key" not in response.json()["data"]

    async def test_get_token_info_disabled_token_hidden(
        self, client: AsyncClient, user_a: User, create_token
    ):
        """Test that key lookups only match enabled tokens by default."""
        token = await create_token(user_a.id, status=TokenStatus.DISABLED)

        response = await client.post("/api/v1/token/info", json={"api_key": token.key})
        assert response.status_code == 404
        assert response.json()["message"] == "Token not found"

    async def test_get_token_info_400_missing_key(self, client: AsyncClient):
        """Test that an empty key is rejected."""
        response = await client.post("/api/v1/token/info", json={})
        assert response.status_code == 400
        assert response.json()["message"] == "API key is required"

    async def test_get_token_info_400_prefix_only_key(self, client: AsyncClient):
        """Test that a bare sk- prefix is treated as a missing key."""
        response = await client.post("/api/v1/token/info", json={"api_key": "sk-"})
        assert response.status_code == 400
        assert response.json()["message"] == "API key is required"

    async def test_get_token_info_404_unknown_key(self, client: AsyncClient):
        """Test that an unknown key returns 404."""
        response = await client.post("/api/v1/token/info", json={"api_key": "nope"})
        assert response.status_code == 404
        assert response.json()["success"] is False
