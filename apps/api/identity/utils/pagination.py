"""
Offset pagination for list endpoints.

Usage:
    GET /api/v1/users?page=2&page_size=20

Out-of-range values are normalized rather than rejected:
- page < 1 (or missing) becomes 1
- page_size < 1 (or missing) becomes the default (10)
- page_size above the maximum (100) is clamped
"""

from fastapi import Query
from pydantic import BaseModel, field_validator

from identity.core.config import settings


class PaginationParams(BaseModel):
    """Normalized page/page_size pair."""

    page: int = 1
    page_size: int = settings.pagination.default_page_size

    @field_validator("page", mode="before")
    @classmethod
    def normalize_page(cls, v: int | None) -> int:
        if v is None or v < 1:
            return 1
        return v

    @field_validator("page_size", mode="before")
    @classmethod
    def normalize_page_size(cls, v: int | None) -> int:
        if v is None or v < 1:
            return settings.pagination.default_page_size
        return min(v, settings.pagination.max_page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


def calculate_total_pages(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` items; 0 if page_size is 0."""
    if page_size == 0:
        return 0
    return (total + page_size - 1) // page_size


def get_pagination_params(
    page: int | None = Query(None, description="Page number (1-indexed)"),
    page_size: int | None = Query(None, description="Items per page (max 100)"),
) -> PaginationParams:
    """FastAPI dependency for offset pagination."""
    return PaginationParams(page=page, page_size=page_size)
