"""
Feature flag routes.
"""

from fastapi import APIRouter, Depends, status

from identity.api.dependencies.services import get_feature_flag_service
from identity.schemas.common import ErrorResponse, MessageResponse
from identity.schemas.feature_flag import (
    FeatureFlagCreate,
    FeatureFlagUpdate,
    FeatureFlagResponse,
    FeatureFlagListResponse,
)
from identity.schemas.user import UserResponse
from identity.services.feature_flag import FeatureFlagService
from identity.utils.pagination import PaginationParams, get_pagination_params

router = APIRouter()

NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=FeatureFlagResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_409_CONFLICT: {"model": ErrorResponse}},
)
async def create_flag(
    data: FeatureFlagCreate,
    flag_service: FeatureFlagService = Depends(get_feature_flag_service),
):
    """Create a new feature flag."""
    return await flag_service.create_flag(data)


@router.get("", response_model=FeatureFlagListResponse)
async def list_flags(
    pagination: PaginationParams = Depends(get_pagination_params),
    flag_service: FeatureFlagService = Depends(get_feature_flag_service),
):
    """List feature flags, paginated."""
    return await flag_service.list_flags(pagination)


@router.get("/{flag_id}", response_model=FeatureFlagResponse, responses=NOT_FOUND)
async def get_flag(
    flag_id: int,
    flag_service: FeatureFlagService = Depends(get_feature_flag_service),
):
    """Get feature flag by ID."""
    return await flag_service.get_flag(flag_id)


@router.put("/{flag_id}", response_model=FeatureFlagResponse, responses=NOT_FOUND)
async def update_flag(
    flag_id: int,
    data: FeatureFlagUpdate,
    flag_service: FeatureFlagService = Depends(get_feature_flag_service),
):
    """Update description and/or enabled."""
    return await flag_service.update_flag(flag_id, data)


@router.delete("/{flag_id}", response_model=MessageResponse, responses=NOT_FOUND)
async def delete_flag(
    flag_id: int,
    flag_service: FeatureFlagService = Depends(get_feature_flag_service),
):
    """Soft delete a feature flag."""
    await flag_service.delete_flag(flag_id)
    return MessageResponse(message="Feature flag deleted successfully")


@router.get(
    "/{flag_id}/users",
    response_model=list[UserResponse],
    responses=NOT_FOUND,
)
async def get_flag_users(
    flag_id: int,
    flag_service: FeatureFlagService = Depends(get_feature_flag_service),
):
    """Get all users a feature flag is assigned to."""
    return await flag_service.get_flag_users(flag_id)
