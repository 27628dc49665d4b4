import pytest
from unittest.mock import AsyncMock, MagicMock

from httpx import AsyncClient, ASGITransport

from catalogue.main import app
from catalogue.database import get_database


@pytest.mark.asyncio
async def test_root_returns_help_text(test_client):
    response = await test_client.get("/")
    assert response.status_code == 200
    assert response.text.startswith("API OK")


@pytest.mark.asyncio
async def test_health(test_client):
    response = await test_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_db_ping(test_client):
    response = await test_client.get("/db-ping")
    assert response.status_code == 200
    assert response.json() == {"ok": 1}


@pytest.mark.asyncio
async def test_db_ping_reports_error_message():
    """Une base injoignable donne 500 avec le message d'erreur."""
    broken = MagicMock()
    broken.ping = AsyncMock(side_effect=ConnectionRefusedError("connection refused"))
    app.dependency_overrides[get_database] = lambda: broken
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/db-ping")
    finally:
        del app.dependency_overrides[get_database]
    assert response.status_code == 500
    assert response.json() == {"error": "connection refused"}

