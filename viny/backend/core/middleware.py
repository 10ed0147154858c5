"""
Request Context Middleware.

Tags every request with an id and the calling frontend, binds both to the
structlog context and reports the handling time.

Headers:
    X-Request-ID     echoed back, generated when the client sends none
    X-Frontend-ID    web, electron, cli, api or internal; anything else is "unknown"
    X-Response-Time  handling time in milliseconds
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from viny.backend.core.config import get_app_config
from viny.backend.core.logging import VALID_SOURCES, get_logger

logger = get_logger(__name__)

UNKNOWN_FRONTEND = "unknown"


def _frontend(request: Request) -> str:
    frontend = request.headers.get("X-Frontend-ID", UNKNOWN_FRONTEND).lower()
    return frontend if frontend in VALID_SOURCES else UNKNOWN_FRONTEND


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds request context to every request.

    Handlers can read ``request.state.request_id`` and
    ``request.state.frontend``. Completed requests are logged at info level
    when ``features.api_request_logging`` is on, at debug otherwise.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        frontend = _frontend(request)
        started = time.perf_counter()

        request.state.request_id = request_id
        request.state.frontend = frontend

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )
        logger.debug(
            "Request started",
            extra={"client_host": request.client.host if request.client else None},
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": _elapsed_ms(started), "error_type": type(exc).__name__},
            )
            raise
        finally:
            structlog.contextvars.clear_contextvars()

        duration_ms = _elapsed_ms(started)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        log = logger.info if get_app_config().features.api_request_logging else logger.debug
        log(
            "Request completed",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
