from fastapi import APIRouter

from src.api.endpoints import generate, health, models

router = APIRouter()
router.include_router(health.router, tags=["health"])
router.include_router(generate.router, tags=["generate"])
router.include_router(models.router, tags=["models"])
