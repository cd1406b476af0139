"""
Request logging middleware.
"""

import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_config import get_logger, set_correlation_id


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with a correlation ID and logs its outcome."""

    def __init__(self, app, exclude_paths: list = None):
        super().__init__(app)
        self.logger = get_logger("middleware.requests")
        self.exclude_paths = exclude_paths or ["/health", "/docs", "/openapi.json"]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_correlation_id(request.headers.get("X-Correlation-ID"))

        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = request_id
            return response

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.error(
                "Request failed",
                extra={
                    'method': request.method,
                    'path': request.url.path,
                    'duration_ms': round((time.time() - start_time) * 1000, 2),
                    'error_type': type(e).__name__,
                },
            )
            raise

        self.logger.info(
            "Request completed",
            extra={
                'method': request.method,
                'path': request.url.path,
                'status_code': response.status_code,
                'duration_ms': round((time.time() - start_time) * 1000, 2),
            },
        )
        response.headers["X-Correlation-ID"] = request_id
        return response
