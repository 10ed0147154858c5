"""
Unit Tests for FastAPI Dependencies.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from viny.backend.core.dependencies import (
    AuthUser,
    _bearer_token,
    enforce_auth_rate_limit,
    get_current_user,
    get_request_id,
)
from viny.backend.core.exceptions import AuthenticationError, RateLimitError
from viny.backend.core.security import create_access_token, create_refresh_token
from viny.backend.security.rate_limiter import AuthRateLimiter


@pytest.fixture
def user():
    return SimpleNamespace(id=7, email="seven@example.com", name="Seven")


class TestBearerToken:
    """Tests for Authorization header parsing."""

    def test_extracts_token(self):
        assert _bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    @pytest.mark.parametrize(
        "header",
        [None, "", "Bearer", "Bearer ", "bearer abc", "BEARER abc", "Basic abc", "Bearer  abc", "Bearer a b"],
    )
    def test_rejects_malformed(self, header):
        with pytest.raises(AuthenticationError, match="Access token required"):
            _bearer_token(header)


class TestGetCurrentUser:
    """Tests for resolving the caller from the access token."""

    @pytest.mark.asyncio
    async def test_valid_token(self, user):
        token = create_access_token(user)

        caller = await get_current_user(authorization=f"Bearer {token}")

        assert caller == AuthUser(id=7, email="seven@example.com", name="Seven")

    @pytest.mark.asyncio
    async def test_refresh_token_rejected(self, user):
        token = create_refresh_token(user)

        with pytest.raises(AuthenticationError):
            await get_current_user(authorization=f"Bearer {token}")


class TestGetRequestId:
    @pytest.mark.asyncio
    async def test_uses_header(self):
        assert await get_request_id("given") == "given"

    @pytest.mark.asyncio
    async def test_generates_when_missing(self):
        first = await get_request_id(None)
        second = await get_request_id(None)
        assert first and first != second


class TestEnforceAuthRateLimit:
    """Tests for the rate limit dependency."""

    def _request(self, host: str | None = "10.0.0.1") -> MagicMock:
        request = MagicMock()
        request.client = SimpleNamespace(host=host) if host else None
        return request

    @pytest.mark.asyncio
    async def test_raises_when_exhausted(self):
        limiter = AuthRateLimiter(window_seconds=60, max_attempts=1)
        with patch("viny.backend.core.dependencies.get_rate_limiter", return_value=limiter):
            await enforce_auth_rate_limit(self._request())
            with pytest.raises(RateLimitError):
                await enforce_auth_rate_limit(self._request())

    @pytest.mark.asyncio
    async def test_missing_client_is_keyed_as_unknown(self):
        limiter = AuthRateLimiter(window_seconds=60, max_attempts=1)
        with patch("viny.backend.core.dependencies.get_rate_limiter", return_value=limiter):
            await enforce_auth_rate_limit(self._request(host=None))
            with pytest.raises(RateLimitError):
                await enforce_auth_rate_limit(self._request(host=None))
            await enforce_auth_rate_limit(self._request(host="10.0.0.2"))

    @pytest.mark.asyncio
    async def test_disabled_by_feature_flag(self, monkeypatch):
        from viny.backend.core.config import get_app_config

        monkeypatch.setattr(get_app_config().features, "auth_rate_limit_enabled", False)
        limiter = AuthRateLimiter(window_seconds=60, max_attempts=1)
        with patch("viny.backend.core.dependencies.get_rate_limiter", return_value=limiter):
            for _ in range(3):
                await enforce_auth_rate_limit(self._request())
