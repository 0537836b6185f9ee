"""HTTP routes. api_router is mounted under API_PREFIX; health_router at the root."""

from fastapi import APIRouter

from sweetshop.api import auth, health, sweets

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(sweets.router, prefix="/sweets", tags=["sweets"])

health_router = APIRouter()
health_router.include_router(health.router, prefix="/health", tags=["health"])
