"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database and the real app.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from viny.backend.core.database import get_db_session
from viny.backend.security import rate_limiter
from viny.backend.security.rate_limiter import AuthRateLimiter

DEFAULT_PASSWORD = "password123"


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client bound to the test database.

    Every request gets its own session that commits on success and rolls
    back on error, the same way the production dependency behaves.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    from viny.backend.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def relaxed_rate_limiter(monkeypatch: pytest.MonkeyPatch) -> AuthRateLimiter:
    """
    Install a fresh, generous auth rate limiter for each test.

    Tests that exercise the limit install their own.
    """
    limiter = AuthRateLimiter(window_seconds=900, max_attempts=1000)
    monkeypatch.setattr(rate_limiter, "_rate_limiter", limiter)
    return limiter


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code
            expected_code: Expected error code (optional)

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is a request validation error (400).

        Args:
            response: httpx Response object
            field: Expected field with validation error (optional)

        Returns:
            Response JSON data
        """
        data = ApiAssertions.assert_error(response, 400, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()


# =============================================================================
# Authentication Fixtures
# =============================================================================


async def register_user(
    client: AsyncClient,
    email: str,
    password: str = DEFAULT_PASSWORD,
    name: str | None = "Test User",
) -> dict[str, Any]:
    """
    Register an account through the API.

    Returns:
        Dict with the response ``data``, the ``access_token``, the
        ``refresh_token`` cookie value and ready-made ``headers``
    """
    body: dict[str, Any] = {"email": email, "password": password}
    if name is not None:
        body["name"] = name
    response = await client.post("/api/auth/register", json=body)
    assert response.status_code == 201, response.text

    data = response.json()["data"]
    return {
        "data": data,
        "access_token": data["accessToken"],
        "refresh_token": response.cookies.get("refreshToken"),
        "headers": {"Authorization": f"Bearer {data['accessToken']}"},
    }


@pytest.fixture
async def auth_user(client: AsyncClient) -> dict[str, Any]:
    """A registered account; see ``register_user`` for the keys."""
    return await register_user(client, "owner@example.com")


@pytest.fixture
def auth_headers(auth_user: dict[str, Any]) -> dict[str, str]:
    """
    Provide authentication headers for API requests.

    Usage:
        async def test_protected_endpoint(client: AsyncClient, auth_headers: dict):
            response = await client.get("/api/notes", headers=auth_headers)
            assert response.status_code == 200
    """
    return auth_user["headers"]


@pytest.fixture
async def other_auth_headers(client: AsyncClient, auth_user: dict[str, Any]) -> dict[str, str]:
    """Headers for a second, unrelated account."""
    other = await register_user(client, "intruder@example.com", name="Intruder")
    return other["headers"]


@pytest.fixture
def register(client: AsyncClient):
    """
    Register extra accounts from inside a test.

    Usage:
        async def test_login(client, register):
            account = await register("someone@example.com")
    """
    async def _register(
        email: str,
        password: str = DEFAULT_PASSWORD,
        name: str | None = "Test User",
    ) -> dict[str, Any]:
        return await register_user(client, email, password=password, name=name)

    return _register
