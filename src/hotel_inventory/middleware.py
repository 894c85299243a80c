"""FastAPI middleware for request tracing and timing."""

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from hotel_inventory.logging import get_logger

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag every request with an ID for tracing.

    - Reads X-Request-ID from request headers, or generates a UUID if missing
    - Binds request_id to the structlog context so every log line carries it
    - Echoes X-Request-ID on the response
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request.

    Requests slower than ``slow_ms`` also emit a ``slow_request`` warning.
    """

    def __init__(self, app: ASGIApp, slow_ms: int = 1000) -> None:
        super().__init__(app)
        self.slow_ms = slow_ms

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
        )
        if duration_ms > self.slow_ms:
            logger.warning(
                "slow_request", method=request.method, path=request.url.path, duration_ms=duration_ms
            )
        return response
