"""
User service.

Owns the user lifecycle and the user side of feature flag assignment.
Every mutating decision reads current state first; the uniqueness checks
here give callers a friendly error, while the schema constraints remain
the guarantee under concurrent writes.
"""

import structlog

from identity.core.exceptions import (
    AlreadyAssignedError,
    AlreadyExistsError,
    ConstraintViolationError,
    NotFoundError,
)
from identity.models import User, FeatureFlag
from identity.repositories import UserRepository, FeatureFlagRepository, AssignmentRepository
from identity.schemas.user import UserCreate, UserUpdate, UserResponse, UserListResponse
from identity.schemas.feature_flag import FeatureFlagResponse
from identity.utils.pagination import PaginationParams, calculate_total_pages

logger = structlog.get_logger()


class UserService:
    """User management service."""

    def __init__(
        self,
        users: UserRepository,
        flags: FeatureFlagRepository,
        assignments: AssignmentRepository,
    ):
        self.users = users
        self.flags = flags
        self.assignments = assignments

    async def create_user(self, data: UserCreate) -> UserResponse:
        """Create a user. Raises AlreadyExistsError if the email is taken."""
        if await self.users.get_by_email(data.email):
            raise AlreadyExistsError("email already exists")

        try:
            user = await self.users.create(
                name=data.name,
                email=data.email,
                enabled=data.enabled,
            )
        except ConstraintViolationError as exc:
            # Lost a race with a concurrent create, or the email belongs
            # to a soft-deleted user
            raise AlreadyExistsError("email already exists") from exc

        logger.info("user.created", user_id=user.id, email=user.email)
        return UserResponse.model_validate(user)

    async def get_user(self, user_id: int) -> UserResponse:
        """Get user by ID."""
        user = await self._require_user(user_id)
        return UserResponse.model_validate(user)

    async def list_users(self, pagination: PaginationParams) -> UserListResponse:
        """List users with pagination."""
        users, total = await self.users.list(
            limit=pagination.limit,
            offset=pagination.offset,
        )
        return UserListResponse(
            users=[UserResponse.model_validate(u) for u in users],
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            total_pages=calculate_total_pages(total, pagination.page_size),
        )

    async def update_user(self, user_id: int, data: UserUpdate) -> UserResponse:
        """Apply the non-null fields present in ``data``."""
        user = await self._require_user(user_id)

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        email = update_data.get("email")
        if email is not None and email != user.email:
            existing = await self.users.get_by_email(email)
            if existing and existing.id != user_id:
                raise AlreadyExistsError("email already exists")

        try:
            user = await self.users.update(user, **update_data)
        except ConstraintViolationError as exc:
            raise AlreadyExistsError("email already exists") from exc

        logger.info("user.updated", user_id=user.id, fields=sorted(update_data))
        return UserResponse.model_validate(user)

    async def delete_user(self, user_id: int) -> None:
        """Soft-delete a user. Its assignments are removed by the store."""
        user = await self._require_user(user_id)
        await self.users.soft_delete(user)
        logger.info("user.deleted", user_id=user_id)

    # Feature flag assignments
    async def get_user_feature_flags(self, user_id: int) -> list[FeatureFlagResponse]:
        """Flags currently assigned to a user."""
        await self._require_user(user_id)
        flags = await self.assignments.flags_for_user(user_id)
        return [FeatureFlagResponse.model_validate(f) for f in flags]

    async def assign_feature_flag(self, user_id: int, flag_key: str) -> None:
        """
        Assign a flag to a user by key.

        Raises:
            NotFoundError: user or flag does not exist
            AlreadyAssignedError: pair is already assigned
            ConstraintViolationError: a concurrent writer got there first
        """
        await self._require_user(user_id)
        flag = await self._require_flag_by_key(flag_key)

        if await self.assignments.is_assigned(user_id, flag.id):
            raise AlreadyAssignedError("feature flag already assigned to user")

        await self.assignments.assign(user_id, flag.id)
        logger.info("feature_flag.assigned", user_id=user_id, flag_key=flag_key)

    async def unassign_feature_flag(self, user_id: int, flag_key: str) -> None:
        """
        Remove a flag from a user by key.

        Unassigning a pair that is not assigned succeeds without change.
        """
        await self._require_user(user_id)
        flag = await self._require_flag_by_key(flag_key)

        await self.assignments.unassign(user_id, flag.id)
        logger.info("feature_flag.unassigned", user_id=user_id, flag_key=flag_key)

    async def _require_user(self, user_id: int) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user

    async def _require_flag_by_key(self, key: str) -> FeatureFlag:
        flag = await self.flags.get_by_key(key)
        if flag is None:
            raise NotFoundError("feature flag not found")
        return flag
