"""FastAPI Application

Main application entry point
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.middleware import setup_error_handlers
from backend.api.routes import (
    cache_router,
    cells_router,
    health_router,
    notebook_router,
    websocket_router,
)
from backend.app.core.config import settings
from backend.app.core.logging import get_logger, setup_logging
from backend.app.rest_book.execution import get_kernel_registry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler

    Startup: Initialize logging and the kernel registry
    Shutdown: Cancel running attempts and close the HTTP client
    """
    # === Startup ===
    setup_logging()

    logger.info(
        "Starting application",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    registry = get_kernel_registry()

    yield

    # === Shutdown ===
    logger.info("Shutting down application")

    await registry.aclose()

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Create FastAPI application"""

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="REST Book kernel - HTTP request notebook execution",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_error_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(cells_router, prefix="/api")
    app.include_router(notebook_router, prefix="/api")
    app.include_router(cache_router, prefix="/api")
    app.include_router(websocket_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
