"""
Application lifecycle management using modern FastAPI lifespan pattern.

This module follows SRP by handling only application startup/shutdown logic.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config.settings import Settings, get_settings
from app.database.async_db import dispose_async_engine
from app.database.setup import DatabaseSetup

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Manages application lifecycle events.

    Startup optionally creates missing tables; shutdown disposes the
    connection pool.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._initialized = False

    async def startup(self) -> None:
        """Execute startup tasks."""
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")
        self._verify_configurations()

        if not self._settings.uses_memory_storage and self._settings.CREATE_TABLES_ON_STARTUP:
            await DatabaseSetup().create_tables()

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        """Execute shutdown tasks."""
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")

        if not self._settings.uses_memory_storage:
            await dispose_async_engine()

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    def _verify_configurations(self) -> None:
        """Verify critical application configurations."""
        if self._settings.JWT_SECRET_KEY == "change-me-in-production" and not self._settings.is_development:
            logger.warning("JWT_SECRET_KEY is using the default value")

        if self._settings.uses_memory_storage:
            logger.warning("STORAGE_BACKEND=memory - data is lost on restart")

        if self._settings.APPOINTMENTS_ADMIN_STATUS_UPDATES:
            logger.info("Admins may update appointment status")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = LifecycleManager(getattr(app.state, "settings", None))

    # Startup
    await lifecycle.startup()

    yield  # Application runs here

    # Shutdown
    await lifecycle.shutdown()
