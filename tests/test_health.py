from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from mappins.main import create_app
from mappins.store import SQLiteStore


@pytest.mark.asyncio
async def test_health(test_client: AsyncClient) -> None:
    """Verify that the health check endpoint responds with 200 OK."""
    response = await test_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert datetime.fromisoformat(body["timestamp"]).tzinfo is not None


@pytest.mark.asyncio
async def test_unknown_api_route(test_client: AsyncClient) -> None:
    response = await test_client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"error": "API endpoint not found"}


@pytest.mark.asyncio
async def test_non_integer_pin_id(test_client: AsyncClient) -> None:
    response = await test_client.get("/api/pins/abc")

    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_cors_preflight(test_client: AsyncClient) -> None:
    response = await test_client.options(
        "/api/pins",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers


@pytest.mark.asyncio
async def test_unexpected_errors_become_json(
    store: SQLiteStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def broken_list_pins() -> list:
        raise RuntimeError("driver blew up")

    monkeypatch.setattr(store, "list_pins", broken_list_pins)
    # The server error middleware re-raises after sending the response
    transport = ASGITransport(
        app=create_app(store, realtime=False), raise_app_exceptions=False
    )

    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/pins")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
