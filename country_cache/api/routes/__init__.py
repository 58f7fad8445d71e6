"""API routers."""

from .countries import router as countries_router
from .health import router as health_router
from .status import router as status_router

__all__ = ["countries_router", "health_router", "status_router"]
