"""
Token API Tests.

Tests for the liveness probe and the token endpoints:
- GET /health
- GET /accessToken (with and without accountID)
- POST /refreshAccessToken
"""
import httpx
import pytest

from backend.test_scripts.test_server_helper import MockProvider, _TestingServerManager, token_reply
from backend.test_scripts.test_utils import print_section, print_success


@pytest.mark.asyncio
async def test_health():
    """TK-001: GET /health - liveness probe."""
    print_section("TK-001: GET /health")
    async with _TestingServerManager() as server:
        response = await server.client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Server is running"}
    print_success("Health probe answered")


@pytest.mark.asyncio
async def test_access_token_organization_level():
    """TK-002: GET /accessToken - no accountID returns the provider payload as-is."""
    provider = MockProvider().add("POST", "/oauth2/token", token_reply)
    async with _TestingServerManager(provider) as server:
        response = await server.client.get("/accessToken")

    assert response.status_code == 200
    data = response.json()
    assert data["access_token"] == "bootstrap-token"
    assert data["expires_in"] == 3600
    assert "/accounts/platform-acct/profile.read" in provider.token_scopes()[0]


@pytest.mark.asyncio
async def test_access_token_entity_scoped():
    """TK-003: GET /accessToken?accountID=... - full scopes for that account."""
    provider = MockProvider().add("POST", "/oauth2/token", token_reply)
    async with _TestingServerManager(provider) as server:
        response = await server.client.get("/accessToken", params={"accountID": "acc-5"})

    assert response.status_code == 200
    assert response.json()["access_token"] == "entity-token"
    assert "/accounts/acc-5/representatives.write" in provider.token_scopes()[0]
    request = provider.calls[0]
    assert request.headers["x-moov-version"] == "v2025.07.00"
    assert request.headers["Origin"] == "http://localhost:3000"


@pytest.mark.asyncio
async def test_access_token_rejected():
    """TK-004: refused grant - 400 failure envelope."""
    provider = MockProvider().reply("POST", "/oauth2/token", 401, {"error": "invalid_client"})
    async with _TestingServerManager(provider) as server:
        response = await server.client.get("/accessToken")

    assert response.status_code == 400
    assert response.json() == {
        "status": "failed",
        "message": "Error fetching moov accessToken",
        "error": {"error": "invalid_client"},
        }


@pytest.mark.asyncio
async def test_access_token_transport_failure():
    """TK-005: unreachable provider - 500 with the exception text."""
    provider = MockProvider().add("POST", "/oauth2/token", httpx.ConnectError)
    async with _TestingServerManager(provider) as server:
        response = await server.client.get("/accessToken")

    assert response.status_code == 500
    data = response.json()
    assert data["status"] == "failed"
    assert "simulated transport failure" in data["error"]


@pytest.mark.asyncio
async def test_refresh_access_token():
    """TK-010: POST /refreshAccessToken - full scopes, refreshToken ignored."""
    provider = MockProvider().add("POST", "/oauth2/token", token_reply)
    async with _TestingServerManager(provider) as server:
        response = await server.client.post(
            "/refreshAccessToken", json={"refreshToken": "old", "accountID": "acc-5"}
            )

    assert response.status_code == 200
    assert response.json()["access_token"] == "entity-token"
    body = MockProvider.body(provider.calls[0])
    assert "old" not in body.values()
    assert len(body["scope"].split(" ")) == 14


@pytest.mark.asyncio
async def test_refresh_requires_account_id():
    """TK-011: missing accountID - 400 before any outbound call."""
    provider = MockProvider()
    async with _TestingServerManager(provider) as server:
        response = await server.client.post("/refreshAccessToken", json={"refreshToken": "old"})

    assert response.status_code == 400
    data = response.json()
    assert data["status"] == "failed"
    assert data["message"] == "Invalid request"
    assert provider.calls == []


@pytest.mark.asyncio
async def test_refresh_rejected():
    """TK-012: refused refresh - 400 with the refresh message."""
    provider = MockProvider().reply("POST", "/oauth2/token", 400, {"error": "invalid_scope"})
    async with _TestingServerManager(provider) as server:
        response = await server.client.post("/refreshAccessToken", json={"accountID": "acc-5"})

    assert response.status_code == 400
    assert response.json()["message"] == "Error fetching refreshed accessToken"
