"""
Service dependencies.

Services are built per request on top of the request's session, so all
repository calls of one request share a single transaction.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_db
from identity.repositories import (
    DatabaseUserRepository,
    DatabaseFeatureFlagRepository,
    DatabaseAssignmentRepository,
)
from identity.services.user import UserService
from identity.services.feature_flag import FeatureFlagService


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """Get user service instance."""
    return UserService(
        users=DatabaseUserRepository(db),
        flags=DatabaseFeatureFlagRepository(db),
        assignments=DatabaseAssignmentRepository(db),
    )


async def get_feature_flag_service(db: AsyncSession = Depends(get_db)) -> FeatureFlagService:
    """Get feature flag service instance."""
    return FeatureFlagService(
        flags=DatabaseFeatureFlagRepository(db),
        assignments=DatabaseAssignmentRepository(db),
    )
