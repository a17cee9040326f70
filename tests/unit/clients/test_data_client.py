"""Unit tests for IRacingDataClient.

Tests focus on authentication, chunk handling toggles and lifecycle.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from iracing.data import IRacingDataClient
from iracing.data.core import HttpError, ValidationError, hash_credentials
from iracing.data.runtime.rest import HTTPClient

BASE = "https://members-ng.iracing.com"
S3 = "https://example.com/"
NOW = 1_700_000_000.0


@pytest.fixture
def client(transport, sleep):
    return IRacingDataClient(transport=transport, sleep=sleep, clock=lambda: NOW)


CHUNKED = {
    "success": True,
    "data": [],
    "chunk_info": {
        "base_download_url": S3,
        "chunk_file_name": "chunk_0.json",
        "total_chunks": 1,
        "chunk_size": 1000,
        "rows": 2,
    },
}


class TestAuthenticate:
    """Test IRacingDataClient.authenticate."""

    @pytest.mark.asyncio
    async def test_posts_hashed_credentials_and_stores_session(self, client, transport):
        auth_response = {
            "authcode": "test-authcode",
            "ssoCookieValue": "test-sso-cookie",
            "custId": 12345,
            "email": "test@example.com",
        }
        transport.add(f"{BASE}/auth", auth_response)

        result = await client.authenticate("Test@Example.com", "password123")

        assert result == auth_response
        call = transport.calls[0]
        assert call["method"] == "POST"
        assert call["headers"]["Content-Type"] == "application/json"
        assert call["body"] == {
            "email": "test@example.com",
            "password": hash_credentials("test@example.com", "password123"),
        }
        assert client.is_authenticated
        assert client.session.current() == "test-sso-cookie"
        assert client.session.authcode == "test-authcode"

    @pytest.mark.asyncio
    async def test_session_cookie_sent_on_later_calls(self, client, transport):
        transport.add(f"{BASE}/auth", {"ssoCookieValue": "tok"})
        transport.add(f"{BASE}/data/car/get", [])

        await client.authenticate("user@example.com", "pw")
        await client.execute("/data/car/get")

        assert transport.calls[1]["cookies"] == {"irsso_membersv2": "tok"}

    @pytest.mark.asyncio
    async def test_token_from_set_cookie_header(self, client, transport):
        transport.add(
            f"{BASE}/auth",
            {"authcode": "code"},
            headers={
                "Content-Type": "application/json",
                "Set-Cookie": "irsso_membersv2=header-token; Path=/",
            },
        )

        await client.authenticate("user@example.com", "pw")

        assert client.session.current() == "header-token"

    @pytest.mark.asyncio
    async def test_no_token_is_not_an_error(self, client, transport):
        transport.add(f"{BASE}/auth", {"verificationRequired": True})

        await client.authenticate("user@example.com", "pw")

        assert not client.is_authenticated

    @pytest.mark.asyncio
    async def test_rejected_login_raises(self, client, transport):
        transport.add(f"{BASE}/auth", {"message": "bad"}, status=401)

        with pytest.raises(HttpError) as exc_info:
            await client.authenticate("user@example.com", "wrong")

        assert exc_info.value.status_code == 401
        assert not client.is_authenticated

    @pytest.mark.asyncio
    async def test_invalid_email_fails_before_network(self, client, transport):
        with pytest.raises(ValidationError):
            await client.authenticate("invalid-email", "pw")
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_injected_hasher(self, transport, sleep):
        client = IRacingDataClient(transport=transport, sleep=sleep, hasher=lambda e, p: "HASH")
        transport.add(f"{BASE}/auth", {"ssoCookieValue": "tok"})

        await client.authenticate("user@example.com", "pw")

        assert transport.calls[0]["body"]["password"] == "HASH"


class TestExecute:
    """Test IRacingDataClient.execute."""

    @pytest.mark.asyncio
    async def test_resolves_chunks_by_default(self, client, transport):
        chunk = [{"subsession_id": 1}, {"subsession_id": 2}]
        url = f"{BASE}/data/results/search_series?season_year=2024&season_quarter=1"
        transport.add(url, CHUNKED)
        transport.add(f"{S3}chunk_0.json", chunk)

        result = await client.execute(
            "/data/results/search_series", {"season_year": 2024, "season_quarter": 1}
        )

        assert len(transport.calls) == 2
        assert transport.urls[1] == f"{S3}chunk_0.json"
        assert result["data"] == chunk
        assert result["chunk_info"] == CHUNKED["chunk_info"]

    @pytest.mark.asyncio
    async def test_client_flag_disables_resolution(self, transport, sleep):
        client = IRacingDataClient(
            transport=transport, sleep=sleep, auto_handle_chunked_responses=False
        )
        transport.add(f"{BASE}/data/results/search_series", CHUNKED)

        result = await client.execute("/data/results/search_series")

        assert len(transport.calls) == 1
        assert result["data"] == []
        assert result["chunk_info"] == CHUNKED["chunk_info"]

    @pytest.mark.asyncio
    async def test_per_call_override_wins(self, client, transport):
        transport.add(f"{BASE}/data/results/search_series", CHUNKED)

        result = await client.execute("/data/results/search_series", handle_chunks=False)

        assert result == CHUNKED
        assert len(transport.calls) == 1

    @pytest.mark.asyncio
    async def test_per_call_override_enables(self, transport, sleep):
        client = IRacingDataClient(
            transport=transport, sleep=sleep, auto_handle_chunked_responses=False
        )
        transport.add(f"{BASE}/data/member/info", {"link": f"{S3}info.json"})
        transport.add(f"{S3}info.json", {"cust_id": 7})

        result = await client.execute("/data/member/info", handle_chunks=True)

        assert result == {"cust_id": 7}

    @pytest.mark.asyncio
    async def test_plain_response_single_call(self, client, transport):
        normal = {"success": True, "data": [{"subsession_id": 1}]}
        transport.add(f"{BASE}/data/results/search_series", normal)

        result = await client.execute("/data/results/search_series")

        assert result == normal
        assert len(transport.calls) == 1

    @pytest.mark.asyncio
    async def test_rate_limit_wait_between_calls(self, client, transport, sleep):
        transport.add(
            f"{BASE}/data/car/get",
            [],
            headers={"x-ratelimit-remaining": "1", "x-ratelimit-reset": str(int(NOW) + 5)},
        )

        await client.execute("/data/car/get")
        await client.execute("/data/car/get")

        assert sleep.delays == [pytest.approx(5.0)]

    @pytest.mark.asyncio
    async def test_http_failure(self, client, transport):
        transport.add(f"{BASE}/data/car/get", {}, status=500)

        with pytest.raises(HttpError, match="HTTP error! status: 500"):
            await client.execute("/data/car/get")


class TestLifecycle:
    """Test client construction and close."""

    def test_defaults(self):
        client = IRacingDataClient()
        assert client.base_url == BASE
        assert client.auto_handle_chunked_responses is True
        assert isinstance(client._transport, HTTPClient)

    def test_custom_base_url(self, transport):
        client = IRacingDataClient(base_url="https://custom.iracing.com", transport=transport)
        assert client.base_url == "https://custom.iracing.com"

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_transport(self):
        async with IRacingDataClient() as client:
            http = client._transport
            http.close = AsyncMock()

        http.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_injected_transport_left_open(self, transport):
        transport.close = AsyncMock()

        async with IRacingDataClient(transport=transport):
            pass

        transport.close.assert_not_awaited()
