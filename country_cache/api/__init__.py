"""
Country Cache API Routes
"""

from fastapi import APIRouter

from country_cache.api.routes import countries_router, health_router, status_router

# Main API router
api_router = APIRouter()

api_router.include_router(countries_router)
api_router.include_router(status_router)
api_router.include_router(health_router)

__all__ = ["api_router"]
