"""
API client tests using aioresponses for clean HTTP mocking
"""
import asyncio
import pytest
import aiohttp
from unittest.mock import MagicMock, patch
from aioresponses import aioresponses

from api.client import APIClient, get_global_client, cleanup_global_client
from exceptions import APIException, PersistenceConflict

BASE = "https://api.example.com/v3"


@pytest.fixture
def mock_config():
    """Mock configuration for testing."""
    config = MagicMock()
    config.db_url = "https://api.example.com"
    config.api_token = "test-token"
    config.api_version = 3
    config.default_timeout = 10
    return config


@pytest.fixture
def api_client(mock_config):
    """Create API client with mocked config."""
    with patch('api.client.get_config', return_value=mock_config):
        yield APIClient()


class TestAPIClientWithAioresponses:
    """Test API client with aioresponses for HTTP mocking."""

    @pytest.mark.asyncio
    async def test_get_request_success(self, api_client):
        """Test successful GET request."""
        expected_data = {"id": 3, "name": "Spring League"}

        with aioresponses() as m:
            m.get(f"{BASE}/fantasyleagues/3", payload=expected_data, status=200)

            result = await api_client.get("fantasyleagues", object_id=3)

            assert result == expected_data

        await api_client.close()

    @pytest.mark.asyncio
    async def test_get_request_404(self, api_client):
        """Test GET request returning 404."""
        with aioresponses() as m:
            m.get(f"{BASE}/fantasyleagues/999", status=404)

            result = await api_client.get("fantasyleagues", object_id=999)

            assert result is None

        await api_client.close()

    @pytest.mark.asyncio
    async def test_get_request_401_auth_error(self, api_client):
        """Test GET request with authentication error."""
        with aioresponses() as m:
            m.get(f"{BASE}/players", status=401)

            with pytest.raises(APIException, match="Authentication failed"):
                await api_client.get("players")

        await api_client.close()

    @pytest.mark.asyncio
    async def test_get_request_403_forbidden(self, api_client):
        """Test GET request with forbidden error."""
        with aioresponses() as m:
            m.get(f"{BASE}/players", status=403)

            with pytest.raises(APIException, match="Access forbidden"):
                await api_client.get("players")

        await api_client.close()

    @pytest.mark.asyncio
    async def test_get_request_500_server_error(self, api_client):
        """Test GET request with server error."""
        with aioresponses() as m:
            m.get(f"{BASE}/players", status=500, body="Internal Server Error")

            with pytest.raises(APIException, match="GET request failed with status 500"):
                await api_client.get("players")

        await api_client.close()

    @pytest.mark.asyncio
    async def test_get_request_with_params(self, api_client):
        """Test GET request with query parameters."""
        expected_data = {"count": 2, "fantasyteams": [{"id": 1}, {"id": 2}]}

        with aioresponses() as m:
            m.get(
                f"{BASE}/fantasyteams?fantasy_league_id=3&include_players=true",
                payload=expected_data,
                status=200
            )

            result = await api_client.get(
                "fantasyteams",
                params=[("fantasy_league_id", "3"), ("include_players", "true")]
            )

            assert result == expected_data

        await api_client.close()

    @pytest.mark.asyncio
    async def test_post_request_success(self, api_client):
        """Test successful POST to a nested endpoint."""
        expected_response = {"league": {"id": 3}, "pick": {"pick_number": 1}}

        with aioresponses() as m:
            m.post(f"{BASE}/fantasyleagues/3/draft/picks", payload=expected_response, status=201)

            result = await api_client.post("fantasyleagues/3/draft/picks", {"expected_pick": 1})

            assert result == expected_response

        await api_client.close()

    @pytest.mark.asyncio
    async def test_post_request_409_conflict(self, api_client):
        """A lost conditional write surfaces as PersistenceConflict."""
        with aioresponses() as m:
            m.post(f"{BASE}/fantasyleagues/3/draft/picks", status=409, body="pick already made")

            with pytest.raises(PersistenceConflict, match="POST conflict: pick already made"):
                await api_client.post("fantasyleagues/3/draft/picks", {"expected_pick": 1})

        await api_client.close()

    @pytest.mark.asyncio
    async def test_post_request_400_error(self, api_client):
        """Test POST request with validation error."""
        with aioresponses() as m:
            m.post(f"{BASE}/draftactions", status=400, body="Invalid data")

            with pytest.raises(APIException, match="POST request failed with status 400"):
                await api_client.post("draftactions", {"invalid": "data"})

        await api_client.close()

    @pytest.mark.asyncio
    async def test_patch_with_precondition_params(self, api_client):
        """Test conditional PATCH carries its precondition in the query string."""
        expected_response = {"id": 3, "draft_status": "paused"}

        with aioresponses() as m:
            m.patch(
                f"{BASE}/fantasyleagues/3?expected_pick=4&expected_status=in_progress",
                payload=expected_response,
                status=200
            )

            result = await api_client.patch(
                "fantasyleagues",
                {"draft_status": "paused"},
                object_id=3,
                params=[("expected_pick", 4), ("expected_status", "in_progress")]
            )

            assert result == expected_response

        await api_client.close()

    @pytest.mark.asyncio
    async def test_patch_conflict(self, api_client):
        with aioresponses() as m:
            m.patch(f"{BASE}/fantasyleagues/3?expected_pick=4", status=409, body="stale")

            with pytest.raises(PersistenceConflict):
                await api_client.patch("fantasyleagues", {}, object_id=3, params=[("expected_pick", 4)])

        await api_client.close()

    @pytest.mark.asyncio
    async def test_patch_request_404(self, api_client):
        with aioresponses() as m:
            m.patch(f"{BASE}/fantasyleagues/999", status=404)

            result = await api_client.patch("fantasyleagues", {"draft_status": "paused"}, object_id=999)

            assert result is None

        await api_client.close()


class TestAPIClientHelpers:
    """Test API client helper functions."""

    @pytest.mark.asyncio
    async def test_global_client_management(self, mock_config):
        """Test global client getter and cleanup."""
        with patch('api.client.get_config', return_value=mock_config):
            client1 = await get_global_client()
            client2 = await get_global_client()

            assert client1 is client2
            assert isinstance(client1, APIClient)

            await cleanup_global_client()

            client3 = await get_global_client()
            assert client3 is not client1

            await cleanup_global_client()

    @pytest.mark.asyncio
    async def test_global_client_cleanup_when_none(self):
        """Test cleanup when no global client exists."""
        await cleanup_global_client()
        await cleanup_global_client()

    def test_missing_token_rejected(self, mock_config):
        mock_config.api_token = ""
        with patch('api.client.get_config', return_value=mock_config):
            with pytest.raises(ValueError, match="API_TOKEN"):
                APIClient()

    def test_headers_carry_bearer_token(self, api_client):
        assert api_client.headers['Authorization'] == 'Bearer test-token'


class TestAPIClientCoverageExtras:
    """Additional coverage tests for API client edge cases."""

    def test_url_building_edge_cases(self, api_client):
        """Test URL building with various edge cases."""
        api_client.base_url = "https://api.example.com/"
        url = api_client._build_url("fantasyleagues/3/draft/picks")
        assert url == "https://api.example.com/v3/fantasyleagues/3/draft/picks"
        assert "//" not in url.replace("https://", "")

        assert api_client._build_url("https://other.example.com/x") == "https://other.example.com/x"
        assert api_client._build_url("fantasyteams", 7) == "https://api.example.com/v3/fantasyteams/7"

    def test_parameter_handling_edge_cases(self, api_client):
        """Test parameter handling with various scenarios."""
        url = api_client._add_params("https://example.com/api?existing=true", [("new", "param")])
        assert url == "https://example.com/api?existing=true&new=param"

        assert api_client._add_params("https://example.com/api") == "https://example.com/api"

    @pytest.mark.asyncio
    async def test_network_error_handling(self, api_client):
        with aioresponses() as m:
            m.get(f"{BASE}/players", exception=aiohttp.ClientConnectionError("refused"))

            with pytest.raises(APIException, match="Network error.*refused"):
                await api_client.get("players")

        await api_client.close()

    @pytest.mark.asyncio
    async def test_timeout_error_handling(self, api_client):
        """Test timeout error handling using aioresponses."""
        with aioresponses() as m:
            m.get(f"{BASE}/players", exception=asyncio.TimeoutError("Request timed out"))

            with pytest.raises(APIException, match="GET failed.*Request timed out"):
                await api_client.get("players")

        await api_client.close()

    @pytest.mark.asyncio
    async def test_session_closed_handling(self, api_client):
        """Test that the client recreates its session when needed."""
        with aioresponses() as m:
            m.get(f"{BASE}/players", payload={"success": True}, status=200)

            await api_client._ensure_session()
            await api_client._session.close()

            result = await api_client.get("players")
            assert result == {"success": True}

        await api_client.close()
