"""
Logging middleware for request/response logging.

The request id is not passed here: RequestIdMiddleware binds it to the
structlog context, which the log formatter merges into every record.
"""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line when a request starts and one when it completes."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        request_info = {"method": request.method, "path": request.url.path}

        logger.debug(
            "Request started",
            extra={**request_info, "query": str(request.query_params)},
        )

        response = await call_next(request)

        logger.info(
            "Request completed",
            extra={
                **request_info,
                "status": response.status_code,
                "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent"),
            },
        )

        return response
