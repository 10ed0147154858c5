"""
Auth Rate Limiter.

Fixed-window attempt counting for the register and login endpoints,
keyed by client address. Limits come from config/settings/security.yaml.
Uses in-memory storage, so counts are per process and reset on restart.
"""

import math
import time
from collections.abc import Callable

from viny.backend.core.config import get_app_config
from viny.backend.core.exceptions import RateLimitError
from viny.backend.core.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_CLIENT = "unknown"


class RateLimitResult:
    """Result of a rate limit check."""

    def __init__(self, allowed: bool, retry_after_seconds: int = 0) -> None:
        self.allowed = allowed
        self.retry_after_seconds = retry_after_seconds


class AuthRateLimiter:
    """
    Per-client fixed-window rate limiter.

    A window opens on a client's first attempt and lasts ``window_seconds``.
    Every attempt inside the window counts, successful or not; once
    ``max_attempts`` have been made further attempts are refused until the
    window ends.
    """

    def __init__(
        self,
        window_seconds: int | None = None,
        max_attempts: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if window_seconds is None or max_attempts is None:
            limits = get_app_config().security.auth_rate_limit
            window_seconds = window_seconds or limits.window_seconds
            max_attempts = max_attempts or limits.max_attempts
        self.window_seconds = window_seconds
        self.max_attempts = max_attempts
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}

    def check(self, client: str | None) -> RateLimitResult:
        """
        Record an attempt from ``client`` and report whether it is allowed.

        Args:
            client: Client address; None is keyed as "unknown"
        """
        key = client or UNKNOWN_CLIENT
        now = self._clock()
        self._prune(now)
        started, attempts = self._windows.get(key, (now, 0))

        if attempts >= self.max_attempts:
            retry_after = max(1, math.ceil(started + self.window_seconds - now))
            logger.warning(
                "Auth rate limit exceeded",
                extra={"client": key, "attempts": attempts, "retry_after": retry_after},
            )
            return RateLimitResult(allowed=False, retry_after_seconds=retry_after)

        self._windows[key] = (started, attempts + 1)
        return RateLimitResult(allowed=True)

    def hit(self, client: str | None) -> None:
        """
        Record an attempt, raising when the client is over its limit.

        Raises:
            RateLimitError: With the seconds until the window ends
        """
        result = self.check(client)
        if not result.allowed:
            raise RateLimitError(
                "Too many authentication attempts. Please try again later.",
                retry_after=result.retry_after_seconds,
            )

    def reset(self) -> None:
        """Forget every window."""
        self._windows.clear()

    def _prune(self, now: float) -> None:
        """Drop windows that have ended, including those of clients that never return."""
        expired = [
            key
            for key, (started, _) in self._windows.items()
            if now - started >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]


_rate_limiter: AuthRateLimiter | None = None


def get_rate_limiter() -> AuthRateLimiter:
    """Get or create the auth rate limiter singleton."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = AuthRateLimiter()
    return _rate_limiter
