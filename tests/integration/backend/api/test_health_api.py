"""
Integration Tests for Health Endpoints and Request Context.
"""

from unittest.mock import patch

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class TestHealth:
    """Tests for /health and /health/ready."""

    @pytest.mark.asyncio
    async def test_liveness(self, client: AsyncClient):
        """Should report healthy without touching dependencies."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_readiness_with_database(
        self,
        client: AsyncClient,
        db_session_factory: async_sessionmaker[AsyncSession],
    ):
        """Should report the database as healthy."""
        with patch(
            "viny.backend.api.health.get_session_factory",
            return_value=db_session_factory,
        ):
            response = await client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_readiness_database_down(self, client: AsyncClient, api):
        """Should answer 503 inside the error envelope."""
        with patch(
            "viny.backend.api.health.check_database",
            return_value={"status": "unhealthy", "error": "connection refused"},
        ):
            response = await client.get("/health/ready")

        body = api.assert_error(response, 503)
        assert body["error"]["details"]["checks"]["database"]["status"] == "unhealthy"


class TestRequestContext:
    """Tests for request ID and timing headers."""

    @pytest.mark.asyncio
    async def test_generates_request_id(self, client: AsyncClient):
        """Should add X-Request-ID and X-Response-Time to every response."""
        response = await client.get("/health")

        assert response.headers["x-request-id"]
        assert response.headers["x-response-time"].endswith("ms")

    @pytest.mark.asyncio
    async def test_propagates_request_id(self, client: AsyncClient, auth_headers):
        """Should echo the caller's request ID in headers and metadata."""
        response = await client.get(
            "/api/notes",
            headers={**auth_headers, "X-Request-ID": "req-123", "X-Frontend-ID": "web"},
        )

        assert response.headers["x-request-id"] == "req-123"
        assert response.json()["metadata"]["requestId"] == "req-123"

    @pytest.mark.asyncio
    async def test_error_metadata_carries_request_id(self, client: AsyncClient):
        """Should include the request ID on error responses too."""
        response = await client.get("/api/notes/1", headers={"X-Request-ID": "req-err"})

        assert response.status_code == 401
        assert response.json()["metadata"]["requestId"] == "req-err"

    @pytest.mark.asyncio
    async def test_unknown_route(self, client: AsyncClient, api):
        """Should wrap framework 404s in the error envelope."""
        response = await client.get("/api/nothing-here")

        api.assert_error(response, 404, "RES_NOT_FOUND")
