"""Middleware tests: request ID, CORS, error envelope."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from reign.config import Settings
from reign.middleware.cors import setup_cors


@pytest.mark.asyncio
async def test_request_id_generated(app_client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await app_client.get("/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 36  # UUID format


@pytest.mark.asyncio
async def test_request_id_preserved(app_client: AsyncClient) -> None:
    """Custom request ID is echoed back in response."""
    response = await app_client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_cors_preflight(app_client: AsyncClient) -> None:
    """CORS preflight returns access-control-allow-origin for configured origin."""
    response = await app_client.options(
        "/health",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


@pytest.mark.asyncio
async def test_404_uses_error_envelope(app_client: AsyncClient) -> None:
    """Unknown paths return 404 with the standard error body."""
    response = await app_client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"error": "Not Found", "details": None}


@pytest.mark.asyncio
async def test_missing_fields_return_400(client: AsyncClient) -> None:
    """Body validation failures are 400, listing the offending fields."""
    response = await client.post("/connect", json={"fromUser": "only-one"})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Missing or invalid fields"
    assert {"field": "toUser", "message": "Field required"} in data["details"]


@pytest.mark.asyncio
async def test_wildcard_origin_drops_credentials() -> None:
    """With ``*`` in cors_origins any origin is allowed, without credentials."""
    app = FastAPI()
    setup_cors(app, Settings(cors_origins=["*"]))

    @app.get("/ping")
    async def ping() -> dict[str, str]:
        return {"pong": "ok"}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/ping", headers={"Origin": "https://anywhere.example"})

    assert response.headers["access-control-allow-origin"] == "*"
    assert "access-control-allow-credentials" not in response.headers
