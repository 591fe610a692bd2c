"""
Feature flag schemas.
"""

from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class FeatureFlagCreate(BaseModel):
    """Feature flag creation schema."""
    key: str = Field(min_length=1, max_length=255, examples=["dark_mode"])
    description: str = Field(default="", examples=["Enable dark mode interface"])
    enabled: bool = False


class FeatureFlagUpdate(BaseModel):
    """
    Partial feature flag update. The key cannot be changed.

    Fields that are absent or null are left unchanged.
    """
    model_config = ConfigDict(extra="forbid")

    description: str | None = None
    enabled: bool | None = None


class FeatureFlagResponse(BaseModel):
    """Feature flag response schema."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    key: str
    description: str
    enabled: bool
    created_at: datetime
    updated_at: datetime


class FeatureFlagListResponse(BaseModel):
    """Paginated feature flag list response."""
    feature_flags: list[FeatureFlagResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
