"""
API routes.
"""

from fastapi import APIRouter

from userhub.api.v1 import activity, auth, users

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(activity.router, prefix="/activity", tags=["Activity"])
