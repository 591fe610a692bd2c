"""Utility helpers."""

from identity.utils.pagination import (
    PaginationParams,
    calculate_total_pages,
    get_pagination_params,
)
from identity.utils.timezone import utc_now

__all__ = [
    "PaginationParams",
    "calculate_total_pages",
    "get_pagination_params",
    "utc_now",
]
