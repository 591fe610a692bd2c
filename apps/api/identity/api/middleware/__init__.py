"""Middleware package."""

from identity.api.middleware.request_id import RequestIdMiddleware, get_request_id
from identity.api.middleware.logging import LoggingMiddleware

__all__ = [
    "RequestIdMiddleware",
    "get_request_id",
    "LoggingMiddleware",
]
