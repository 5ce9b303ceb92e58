"""
Application factory for the Menuboard API.

Builds the FastAPI application with middleware, rate limiting, exception
handlers and every router mounted under /api/v1 and at the root.
"""

import logging

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from . import config
from .errors import register_exception_handlers
from .middleware import RequestIDMiddleware, TenantMiddleware
from .routes import ALL_ROUTERS, limiter

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create a FastAPI application.

    Returns:
        Configured FastAPI application
    """
    logger.info("Creating FastAPI application")

    app = FastAPI(
        title="Menuboard API",
        description="Multi-tenant restaurant menu backend",
        version="1.0.0",
    )

    # Add tenant middleware
    app.add_middleware(TenantMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials="*" not in config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Configure rate limiting
    app.state.limiter = limiter
    register_exception_handlers(app)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Serve files written by the local storage backend
    if config.STORAGE_BACKEND == "local":
        app.mount(
            config.LOCAL_UPLOAD_URL_PREFIX,
            StaticFiles(directory=config.LOCAL_UPLOAD_DIR, check_dir=False),
            name="uploads",
        )

    # Include routers with API version prefix
    api_v1 = APIRouter(prefix="/api/v1")
    for router in ALL_ROUTERS:
        api_v1.include_router(router)
    app.include_router(api_v1)

    # Also mount at root
    for router in ALL_ROUTERS:
        app.include_router(router)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    logger.info("Application created with %d routers", len(ALL_ROUTERS))

    return app


def run(host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
    """
    Run the API with uvicorn.

    Args:
        host: Host to bind to
        port: Port to run on
        reload: Enable auto-reload for development
    """
    import uvicorn

    logger.info("Starting server on %s:%d", host, port)

    uvicorn.run(
        "menuboard.main:app",
        host=host,
        port=port,
        reload=reload,
    )
