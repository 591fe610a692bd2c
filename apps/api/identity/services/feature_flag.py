"""
Feature flag service.
"""

import structlog

from identity.core.exceptions import AlreadyExistsError, ConstraintViolationError, NotFoundError
from identity.models import FeatureFlag
from identity.repositories import FeatureFlagRepository, AssignmentRepository
from identity.schemas.feature_flag import (
    FeatureFlagCreate,
    FeatureFlagUpdate,
    FeatureFlagResponse,
    FeatureFlagListResponse,
)
from identity.schemas.user import UserResponse
from identity.utils.pagination import PaginationParams, calculate_total_pages

logger = structlog.get_logger()


class FeatureFlagService:
    """Feature flag management service."""

    def __init__(self, flags: FeatureFlagRepository, assignments: AssignmentRepository):
        self.flags = flags
        self.assignments = assignments

    async def create_flag(self, data: FeatureFlagCreate) -> FeatureFlagResponse:
        """Create a flag. Raises AlreadyExistsError if the key is taken."""
        if await self.flags.get_by_key(data.key):
            raise AlreadyExistsError("feature flag key already exists")

        try:
            flag = await self.flags.create(
                key=data.key,
                description=data.description,
                enabled=data.enabled,
            )
        except ConstraintViolationError as exc:
            raise AlreadyExistsError("feature flag key already exists") from exc

        logger.info("feature_flag.created", flag_id=flag.id, key=flag.key)
        return FeatureFlagResponse.model_validate(flag)

    async def get_flag(self, flag_id: int) -> FeatureFlagResponse:
        """Get flag by ID."""
        flag = await self._require_flag(flag_id)
        return FeatureFlagResponse.model_validate(flag)

    async def get_flag_by_key(self, key: str) -> FeatureFlagResponse:
        """Get flag by key."""
        flag = await self.flags.get_by_key(key)
        if flag is None:
            raise NotFoundError("feature flag not found")
        return FeatureFlagResponse.model_validate(flag)

    async def list_flags(self, pagination: PaginationParams) -> FeatureFlagListResponse:
        """List flags with pagination."""
        flags, total = await self.flags.list(
            limit=pagination.limit,
            offset=pagination.offset,
        )
        return FeatureFlagListResponse(
            feature_flags=[FeatureFlagResponse.model_validate(f) for f in flags],
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            total_pages=calculate_total_pages(total, pagination.page_size),
        )

    async def update_flag(self, flag_id: int, data: FeatureFlagUpdate) -> FeatureFlagResponse:
        """Update description and/or enabled. The key is immutable."""
        flag = await self._require_flag(flag_id)

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        flag = await self.flags.update(flag, **update_data)

        logger.info("feature_flag.updated", flag_id=flag.id, fields=sorted(update_data))
        return FeatureFlagResponse.model_validate(flag)

    async def delete_flag(self, flag_id: int) -> None:
        """Soft-delete a flag. Its assignments are removed by the store."""
        flag = await self._require_flag(flag_id)
        await self.flags.soft_delete(flag)
        logger.info("feature_flag.deleted", flag_id=flag_id, key=flag.key)

    async def get_flag_users(self, flag_id: int) -> list[UserResponse]:
        """Users the flag is assigned to."""
        await self._require_flag(flag_id)
        users = await self.assignments.users_for_flag(flag_id)
        return [UserResponse.model_validate(u) for u in users]

    async def _require_flag(self, flag_id: int) -> FeatureFlag:
        flag = await self.flags.get_by_id(flag_id)
        if flag is None:
            raise NotFoundError("feature flag not found")
        return flag
