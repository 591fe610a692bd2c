"""
SQLAlchemy repositories for users, feature flags and assignments.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select, delete, insert, func
from sqlalchemy.ext.asyncio import AsyncSession

from identity.models import User, FeatureFlag, UserFeatureFlag
from .base import SoftDeleteRepository, storage_errors
from .interfaces import UserRepository, FeatureFlagRepository, AssignmentRepository


class DatabaseUserRepository(SoftDeleteRepository[User], UserRepository):
    """PostgreSQL-backed user storage."""

    model = User
    entity_name = "user"

    async def create(self, *, name: str, email: str, enabled: bool = True) -> User:
        return await super().create(name=name, email=email, enabled=enabled)

    async def get_by_email(self, email: str) -> User | None:
        return await self.get_one(email=email)

    async def update(self, user: User, **fields: Any) -> User:
        return await super().update(user, **fields)

    async def _cascade_soft_delete(self, user: User) -> None:
        # FK cascades only fire on hard deletes
        await self.db.execute(
            delete(UserFeatureFlag).where(UserFeatureFlag.user_id == user.id)
        )


class DatabaseFeatureFlagRepository(SoftDeleteRepository[FeatureFlag], FeatureFlagRepository):
    """PostgreSQL-backed feature flag storage."""

    model = FeatureFlag
    entity_name = "feature flag"

    async def create(
        self,
        *,
        key: str,
        description: str = "",
        enabled: bool = False,
    ) -> FeatureFlag:
        return await super().create(key=key, description=description, enabled=enabled)

    async def get_by_key(self, key: str) -> FeatureFlag | None:
        return await self.get_one(key=key)

    async def update(self, flag: FeatureFlag, **fields: Any) -> FeatureFlag:
        return await super().update(flag, **fields)

    async def _cascade_soft_delete(self, flag: FeatureFlag) -> None:
        await self.db.execute(
            delete(UserFeatureFlag).where(UserFeatureFlag.feature_flag_id == flag.id)
        )


class DatabaseAssignmentRepository(AssignmentRepository):
    """
    PostgreSQL-backed user <-> feature flag assignments.

    The composite primary key and the foreign keys are the real
    guarantees; callers may pre-check with is_assigned for a friendlier
    error, but a lost race still ends in ConstraintViolationError here.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def assign(self, user_id: int, flag_id: int) -> None:
        stmt = insert(UserFeatureFlag).values(
            user_id=user_id,
            feature_flag_id=flag_id,
        )
        with storage_errors("assign feature flag"):
            await self.db.execute(stmt)

    async def unassign(self, user_id: int, flag_id: int) -> None:
        stmt = delete(UserFeatureFlag).where(
            UserFeatureFlag.user_id == user_id,
            UserFeatureFlag.feature_flag_id == flag_id,
        )
        with storage_errors("unassign feature flag"):
            await self.db.execute(stmt)

    async def is_assigned(self, user_id: int, flag_id: int) -> bool:
        stmt = select(func.count()).select_from(UserFeatureFlag).where(
            UserFeatureFlag.user_id == user_id,
            UserFeatureFlag.feature_flag_id == flag_id,
        )
        with storage_errors("check assignment"):
            count = await self.db.scalar(stmt)
        return (count or 0) > 0

    async def flags_for_user(self, user_id: int) -> list[FeatureFlag]:
        stmt = (
            select(FeatureFlag)
            .join(UserFeatureFlag, UserFeatureFlag.feature_flag_id == FeatureFlag.id)
            .where(
                UserFeatureFlag.user_id == user_id,
                FeatureFlag.deleted_at.is_(None),
            )
            .order_by(FeatureFlag.id)
        )
        with storage_errors("get user feature flags"):
            result = await self.db.execute(stmt)
            return list(result.scalars().all())

    async def users_for_flag(self, flag_id: int) -> list[User]:
        stmt = (
            select(User)
            .join(UserFeatureFlag, UserFeatureFlag.user_id == User.id)
            .where(
                UserFeatureFlag.feature_flag_id == flag_id,
                User.deleted_at.is_(None),
            )
            .order_by(User.id)
        )
        with storage_errors("get feature flag users"):
            result = await self.db.execute(stmt)
            return list(result.scalars().all())
