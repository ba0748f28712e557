"""HTTP routes, mounted without a version prefix to keep the public paths stable."""

from fastapi import APIRouter

from app.api.routes import admin, auth, health, profile

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(profile.router, prefix="/me", tags=["profile"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
