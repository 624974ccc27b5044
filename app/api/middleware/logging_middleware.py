"""
Request logging middleware for FastAPI application.

Every request gets a correlation id (taken from X-Correlation-ID when the
client sends one) that is echoed back on the response.
"""

import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    HTTP middleware for request/response logging.

    Logs method, path, status and duration. Health checks are not logged.
    """

    QUIET_PATHS: tuple[str, ...] = ("/health", "/favicon.ico")

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex[:8]
        request.state.correlation_id = correlation_id

        if request.url.path.startswith(self.QUIET_PATHS):
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        started = time.perf_counter()
        logger.info(f"[{correlation_id}] --> {request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"[{correlation_id}] <-- {request.method} {request.url.path} ERROR in {elapsed_ms:.2f}ms: {e}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            f"[{correlation_id}] <-- {request.method} {request.url.path} {response.status_code} in {elapsed_ms:.2f}ms",
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
