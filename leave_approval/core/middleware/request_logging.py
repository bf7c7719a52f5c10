"""
HTTP request logging.

Assigns every request a correlation id, exposes it to the logging layer
through the `request_id` context variable and echoes it back in the
`X-Request-ID` response header.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from leave_approval.core.logging import get_logger, request_id

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """HTTP request/response logging middleware"""

    def __init__(self, app, excluded_paths=None):
        super().__init__(app)
        self.excluded_paths = set(excluded_paths or {'/docs', '/redoc', '/openapi.json'})

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        token = request_id.set(correlation_id)
        try:
            if request.url.path in self.excluded_paths:
                response = await call_next(request)
            else:
                start_time = time.time()
                response = await call_next(request)
                process_time = time.time() - start_time

                logger.info(
                    f"{request.method} {request.url.path} -> {response.status_code}",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": response.status_code,
                        "process_time_ms": round(process_time * 1000, 2),
                    },
                )
            response.headers["X-Request-ID"] = correlation_id
            return response
        finally:
            request_id.reset(token)
