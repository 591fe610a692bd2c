"""
User routes, including feature flag assignment.
"""

from fastapi import APIRouter, Depends, status

from identity.api.dependencies.services import get_user_service
from identity.schemas.common import ErrorResponse, MessageResponse
from identity.schemas.feature_flag import FeatureFlagResponse
from identity.schemas.user import UserCreate, UserUpdate, UserResponse, UserListResponse
from identity.services.user import UserService
from identity.utils.pagination import PaginationParams, get_pagination_params

router = APIRouter()

NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}
CONFLICT = {status.HTTP_409_CONFLICT: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses=CONFLICT,
)
async def create_user(
    data: UserCreate,
    user_service: UserService = Depends(get_user_service),
):
    """Create a new user."""
    return await user_service.create_user(data)


@router.get("", response_model=UserListResponse)
async def list_users(
    pagination: PaginationParams = Depends(get_pagination_params),
    user_service: UserService = Depends(get_user_service),
):
    """List users, paginated."""
    return await user_service.list_users(pagination)


@router.get("/{user_id}", response_model=UserResponse, responses=NOT_FOUND)
async def get_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
):
    """Get user by ID."""
    return await user_service.get_user(user_id)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={**NOT_FOUND, **CONFLICT},
)
async def update_user(
    user_id: int,
    data: UserUpdate,
    user_service: UserService = Depends(get_user_service),
):
    """Update the fields present in the body."""
    return await user_service.update_user(user_id, data)


@router.delete("/{user_id}", response_model=MessageResponse, responses=NOT_FOUND)
async def delete_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
):
    """Soft delete a user."""
    await user_service.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")


@router.get(
    "/{user_id}/feature-flags",
    response_model=list[FeatureFlagResponse],
    responses=NOT_FOUND,
)
async def get_user_feature_flags(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
):
    """Get all feature flags assigned to a user."""
    return await user_service.get_user_feature_flags(user_id)


@router.post(
    "/{user_id}/feature-flags/{key}",
    response_model=MessageResponse,
    responses={**NOT_FOUND, **CONFLICT},
)
async def assign_feature_flag(
    user_id: int,
    key: str,
    user_service: UserService = Depends(get_user_service),
):
    """Assign a feature flag to a user by flag key."""
    await user_service.assign_feature_flag(user_id, key)
    return MessageResponse(message="Feature flag assigned successfully")


@router.delete(
    "/{user_id}/feature-flags/{key}",
    response_model=MessageResponse,
    responses=NOT_FOUND,
)
async def unassign_feature_flag(
    user_id: int,
    key: str,
    user_service: UserService = Depends(get_user_service),
):
    """Remove a feature flag from a user. Not an error if it was not assigned."""
    await user_service.unassign_feature_flag(user_id, key)
    return MessageResponse(message="Feature flag unassigned successfully")
