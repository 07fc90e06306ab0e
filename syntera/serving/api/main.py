"""
FastAPI Application Factory

Creates the API application: middleware, error handlers and routers. The
process-level concerns (database pool lifespan, static client hosting) are
added by ``syntera.main``.
"""

from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from syntera.config import get_settings
from syntera.serving.api.errors import register_error_handlers
from syntera.serving.api.middleware import RequestLoggingMiddleware
from syntera.serving.api.routes import (
    auth_router,
    feedback_router,
    health_router,
    messages_router,
    sales_router,
)


def create_api_app(lifespan: Optional[Any] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        lifespan: Optional lifespan context manager (database pool setup)

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Syntera CRM API",
        description="Accounts, support messages, feedback and sales metrics",
        version=settings.version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)

    app.include_router(health_router, prefix="/api", tags=["Health"])
    app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
    app.include_router(messages_router, prefix="/api/messages", tags=["Messages"])
    app.include_router(feedback_router, prefix="/api/feedback", tags=["Feedback"])
    app.include_router(sales_router, prefix="/api/sales", tags=["Sales"])

    @app.get("/api/info", tags=["Health"])
    async def api_info():
        """API information endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "environment": settings.app_env,
        }

    return app
