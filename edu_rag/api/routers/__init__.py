"""API routers."""

from .health import router as health_router
from .notifications import router as notifications_router
from .processing import router as processing_router
from .search import router as search_router

__all__ = [
    "health_router",
    "notifications_router",
    "processing_router",
    "search_router",
]
