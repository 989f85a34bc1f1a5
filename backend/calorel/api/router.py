"""
API router aggregator.
Includes all route modules.
"""
from fastapi import APIRouter
from calorel.api import health, nutrition, ai_usage

api_router = APIRouter()

# Include route modules
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(nutrition.router, prefix="/nutrition", tags=["nutrition"])
api_router.include_router(ai_usage.router, prefix="/ai-usage", tags=["ai-usage"])
