"""
Database models.
"""

from .base import Base, TimestampMixin, SoftDeleteMixin
from .user import User
from .feature_flag import FeatureFlag, UserFeatureFlag

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "SoftDeleteMixin",
    # Models
    "User",
    "FeatureFlag",
    "UserFeatureFlag",
]
