"""
FastAPI entry point for the search and processing API.

Routers are mounted under API_PREFIX. The lifespan hook subscribes the
notifier to processing transitions at startup and releases the cached
services (database engine included) at shutdown.

Dependencies: fastapi, uvicorn, edu_rag.api.routers
System role: HTTP application assembly and local server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from edu_rag import __version__
from edu_rag.api.deps.dependencies import get_service_cache
from edu_rag.api.errors import register_exception_handlers
from edu_rag.configs import get_settings
from edu_rag.observability.logger import configure_logging
from edu_rag.observability.middleware import PROCESS_TIME_HEADER, REQUEST_ID_HEADER, RequestLoggingMiddleware

from .routers import (
    health_router,
    notifications_router,
    processing_router,
    search_router,
)

API_PREFIX = "/api/v1"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    services = get_service_cache()
    services.notifier.init()
    logger.info(
        f"{__name__}:lifespan - Notifier subscribed to processing transitions",
        extra={"environment": services.settings.environment},
    )
    try:
        yield
    finally:
        await services.close()
        logger.info(f"{__name__}:lifespan - Services released")


def create_app() -> FastAPI:
    """
    Build the application: logging, CORS, request logging, error mapping and routers.

    Returns:
        FastAPI: Application ready to hand to uvicorn or TestClient
    """
    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else settings.log_level)

    app = FastAPI(
        title="Edu RAG Search API",
        description="Multi-language document search with processing status tracking",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, PROCESS_TIME_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    for router in (health_router, search_router, processing_router, notifications_router):
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("edu_rag.api.main:app", host="0.0.0.0", port=8000)
