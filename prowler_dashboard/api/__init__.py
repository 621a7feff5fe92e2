"""API routes, mounted under settings.API_PREFIX."""

from fastapi import APIRouter

from prowler_dashboard.api import assets, auth, health, prowler, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(prowler.router, prefix="/prowler", tags=["prowler"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(assets.router, prefix="/assets", tags=["assets"])
