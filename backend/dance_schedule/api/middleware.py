"""
Request middleware for logging, timing, and request ID tracking.
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog

from dance_schedule.core.logging import get_logger
from dance_schedule.core.metrics import record_http_request

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Binds a request id (incoming X-Request-ID or a fresh one), method, path
    and any occurrence filter bounds to the structlog context, then logs and
    counts the finished request.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        # occurrence filter bounds, when the caller gave any
        bounds = {
            key: request.query_params[key]
            for key in ("before", "after")
            if key in request.query_params
        }
        if bounds:
            structlog.contextvars.bind_contextvars(**bounds)

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = time.perf_counter() - start_time
            record_http_request(request.method, 500, elapsed)
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=round(elapsed * 1000, 2),
            )
            raise

        elapsed = time.perf_counter() - start_time
        duration_ms = round(elapsed * 1000, 2)
        record_http_request(request.method, response.status_code, elapsed)
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        return response
