"""
Request logging middleware.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from stockledger.config import get_logger

logger = get_logger(__name__)

ACTOR_HEADER = "X-Actor"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request with a short request ID and its duration.

    The ID is stored on ``request.state`` so error responses can be
    correlated with the request log line.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        start = time.perf_counter()

        logger.debug(
            "request_started",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            actor=request.headers.get(ACTOR_HEADER),
        )

        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "request_completed",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
