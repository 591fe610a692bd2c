"""
API routes aggregation.
"""

from fastapi import APIRouter

from .users import router as users_router
from .feature_flags import router as feature_flags_router

router = APIRouter()

router.include_router(users_router, prefix="/v1/users", tags=["users"])
router.include_router(feature_flags_router, prefix="/v1/feature-flags", tags=["feature-flags"])
