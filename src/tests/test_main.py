"""Test basic application health."""
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from codity import __version__
from codity.main import app


@pytest.mark.asyncio
async def test_health_check(async_client: AsyncClient) -> None:
    """Test the health check endpoint."""
    response = await async_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "codity-api"
    assert data["version"] == __version__


@pytest.mark.asyncio
async def test_health_check_response_structure(async_client: AsyncClient) -> None:
    """Test that health check response has correct structure."""
    response = await async_client.get("/health")

    data = response.json()
    assert set(data) == {"status", "service", "version", "timestamp", "checks"}
    assert set(data["checks"]) == {"database"}

    db_check = data["checks"]["database"]
    assert db_check["status"] in ["healthy", "unhealthy"]
    assert isinstance(db_check["response_time_ms"], (int, float))
    assert db_check["response_time_ms"] >= 0
    assert data["timestamp"].endswith("Z")


@pytest.mark.asyncio
async def test_health_check_database_unhealthy_returns_degraded(
    async_client: AsyncClient,
) -> None:
    """Test health check returns degraded, still with 200, when the database is down."""
    with patch("codity.main.check_database_connection", new_callable=AsyncMock) as mock_db:
        mock_db.return_value = False

        response = await async_client.get("/health")

        assert response.status_code == 200
        data = response.json()

        assert data["checks"]["database"]["status"] == "unhealthy"
        assert data["status"] == "degraded"


@pytest.mark.asyncio
async def test_health_check_carries_request_id(async_client: AsyncClient) -> None:
    """Test that the request ID middleware is installed on the app."""
    response = await async_client.get("/health")

    assert "x-request-id" in response.headers


@pytest.mark.asyncio
async def test_docs_accessible(async_client: AsyncClient) -> None:
    """Test that API documentation is accessible."""
    response = await async_client.get("/docs")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_openapi_schema(async_client: AsyncClient) -> None:
    """Test that OpenAPI schema lists the user routes."""
    response = await async_client.get("/openapi.json")

    assert response.status_code == 200
    schema = response.json()
    assert schema["info"]["title"] == "Codity API"
    for path in (
        "/api/v1/users",
        "/api/v1/users/{user_id}",
        "/api/v1/users/{user_id}/followers",
        "/api/v1/users/{user_id}/following",
        "/api/v1/users/follow",
        "/api/v1/users/unfollow",
        "/api/v1/users/profile",
    ):
        assert path in schema["paths"]


@pytest.mark.asyncio
async def test_lifespan_creates_tables_and_disposes_engine() -> None:
    """Test that startup creates tables and shutdown closes the pool."""
    with patch("codity.main.init_models", new_callable=AsyncMock) as mock_init, patch(
        "codity.main.close_database", new_callable=AsyncMock
    ) as mock_close:
        async with app.router.lifespan_context(app):
            mock_init.assert_awaited_once()
            mock_close.assert_not_awaited()

        mock_close.assert_awaited_once()
