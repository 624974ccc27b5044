"""
Application factory for FastAPI.

This module follows SRP by handling only FastAPI application creation and configuration.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.exception_handlers import register_exception_handlers
from app.api.middleware.logging_middleware import RequestLoggingMiddleware
from app.api.router import api_router
from app.config.settings import Settings, get_settings
from app.core.lifecycle import lifespan

logger = logging.getLogger(__name__)


class AppFactory:
    """
    Factory for creating and configuring FastAPI applications.

    Each configuration step is handled by a dedicated method.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """
        Initialize app factory.

        Args:
            settings: Application settings (uses default if not provided)
        """
        self._settings = settings or get_settings()

    def create_app(self) -> FastAPI:
        """
        Create and configure the FastAPI application.

        Returns:
            Configured FastAPI application instance.
        """
        app = self._create_base_app()
        app.state.settings = self._settings

        self._configure_middleware(app)
        self._configure_exception_handlers(app)
        self._configure_routes(app)
        self._configure_health_endpoint(app)

        logger.info(f"Application created: {self._settings.PROJECT_NAME}")
        return app

    def _create_base_app(self) -> FastAPI:
        """Create the base FastAPI application with lifespan."""
        return FastAPI(
            title=self._settings.PROJECT_NAME,
            description=self._settings.PROJECT_DESCRIPTION,
            version=self._settings.VERSION,
            docs_url=f"{self._settings.API_V1_STR}/docs" if self._settings.DEBUG else None,
            redoc_url=f"{self._settings.API_V1_STR}/redoc" if self._settings.DEBUG else None,
            lifespan=lifespan,
        )

    def _configure_middleware(self, app: FastAPI) -> None:
        """
        Configure application middleware.

        Middleware order matters:
        1. CORS (outermost)
        2. Request logging
        """
        app.add_middleware(RequestLoggingMiddleware)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._get_cors_origins(),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Correlation-ID"],
        )

        logger.info("Middleware configured")

    def _configure_exception_handlers(self, app: FastAPI) -> None:
        """Register exception handlers."""
        register_exception_handlers(app)

    def _configure_routes(self, app: FastAPI) -> None:
        """Configure API routes (with /api/v1 prefix)."""
        app.include_router(api_router, prefix=self._settings.API_V1_STR)
        logger.info("Routes configured")

    def _configure_health_endpoint(self, app: FastAPI) -> None:
        """Add health check endpoint."""

        @app.get("/health", tags=["health"])
        async def health_check() -> dict[str, str]:
            """Verify application health status."""
            return {
                "status": "ok",
                "environment": self._settings.ENVIRONMENT,
                "storage": self._settings.STORAGE_BACKEND,
            }

    def _get_cors_origins(self) -> list[str]:
        """Get allowed CORS origins; everything is allowed in debug."""
        if self._settings.DEBUG:
            return ["*"]
        return self._settings.CORS_ORIGINS


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create FastAPI application using the factory.

    Args:
        settings: Optional settings override

    Returns:
        Configured FastAPI application
    """
    factory = AppFactory(settings)
    return factory.create_app()
