"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.admin import router as admin_router
from api.v1.routes.auth import router as auth_router
from api.v1.routes.profiles import router as profiles_router
from api.v1.routes.swap_requests import router as swap_requests_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(profiles_router)
router.include_router(swap_requests_router)
router.include_router(admin_router)
