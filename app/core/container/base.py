# ============================================================================
# SCOPE: GLOBAL
# Description: Contenedor base con singletons compartidos (storage, dispatcher,
#              auth provider). Recursos creados una vez y reutilizados.
# ============================================================================
"""
Base Container - Shared Singletons.

Single Responsibility: Manage shared infrastructure resources.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config.settings import Settings, get_settings
from app.database.async_db import get_session_factory
from app.domains.appointments.application.ports import (
    IAuthProvider,
    INotificationDispatcher,
    IUnitOfWork,
)
from app.domains.appointments.infrastructure.auth import JWTAuthProvider
from app.domains.appointments.infrastructure.memory import InMemoryStore, InMemoryUnitOfWork
from app.domains.appointments.infrastructure.notifications import (
    DatabaseNotificationDispatcher,
    InMemoryNotificationDispatcher,
    LoggingNotificationDispatcher,
)
from app.domains.appointments.infrastructure.unit_of_work import SQLAlchemyUnitOfWork

logger = logging.getLogger(__name__)


class BaseContainer:
    """
    Base container for shared singletons.

    Single Responsibility: Create and cache the storage backend, the
    notification dispatcher and the auth provider.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize base container.

        Args:
            settings: Optional settings (defaults to the cached global settings)
        """
        self.settings = settings or get_settings()

        # Singletons
        self._memory_store: InMemoryStore | None = None
        self._dispatcher: INotificationDispatcher | None = None
        self._auth_provider: JWTAuthProvider | None = None

        logger.info(
            f"BaseContainer initialized (storage={self.settings.STORAGE_BACKEND}, "
            f"notifications={self.settings.NOTIFICATION_BACKEND})"
        )

    # ==================== STORAGE ====================

    @property
    def uses_memory_storage(self) -> bool:
        return self.settings.STORAGE_BACKEND == "memory"

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get the shared async session factory (postgres backend)."""
        return get_session_factory()

    def get_memory_store(self) -> InMemoryStore:
        """Get the in-memory store (singleton)."""
        if self._memory_store is None:
            logger.info("Creating InMemoryStore")
            self._memory_store = InMemoryStore()
        return self._memory_store

    def create_unit_of_work(self) -> IUnitOfWork:
        """Create a fresh unit of work for the configured backend."""
        if self.uses_memory_storage:
            return InMemoryUnitOfWork(self.get_memory_store())
        return SQLAlchemyUnitOfWork(self.get_session_factory())

    # ==================== COLLABORATORS ====================

    def get_notification_dispatcher(self) -> INotificationDispatcher:
        """Get notification dispatcher (singleton)."""
        if self._dispatcher is None:
            backend = self.settings.NOTIFICATION_BACKEND
            if backend == "memory":
                self._dispatcher = InMemoryNotificationDispatcher()
            elif backend == "database" and not self.uses_memory_storage:
                self._dispatcher = DatabaseNotificationDispatcher(self.get_session_factory())
            else:
                self._dispatcher = LoggingNotificationDispatcher()
            logger.info(f"Notification dispatcher: {type(self._dispatcher).__name__}")
        return self._dispatcher

    def get_auth_provider(self) -> IAuthProvider:
        """Get JWT auth provider (singleton)."""
        return self.get_jwt_provider()

    def get_jwt_provider(self) -> JWTAuthProvider:
        if self._auth_provider is None:
            self._auth_provider = JWTAuthProvider(
                secret_key=self.settings.JWT_SECRET_KEY,
                algorithm=self.settings.JWT_ALGORITHM,
                access_token_expire_minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES,
            )
        return self._auth_provider

    def get_config(self) -> dict:
        """Get current configuration."""
        return {
            "storage_backend": self.settings.STORAGE_BACKEND,
            "notification_backend": self.settings.NOTIFICATION_BACKEND,
            "admin_status_updates": self.settings.APPOINTMENTS_ADMIN_STATUS_UPDATES,
            "domains": ["appointments"],
        }
