# ============================================================================
# SCOPE: GLOBAL
# Description: Contenedor principal de inyección de dependencias (singleton).
#              Compone los sub-contenedores de dominio.
# ============================================================================
"""
Dependency Injection Container.

Centralized container for creating and managing all application dependencies.
Implements Dependency Inversion Principle by wiring concrete implementations to interfaces.

This module is the facade that composes all domain-specific containers.
"""

from __future__ import annotations

import logging

from app.config.settings import Settings
from app.domains.appointments.application.ports import (
    IAuthProvider,
    INotificationDispatcher,
    ISlotSource,
    IUnitOfWork,
)

from .appointments import AppointmentsContainer
from .base import BaseContainer

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency Injection Container (Facade).

    Single Responsibility: Compose and delegate to domain-specific containers.
    Singleton Pattern: Ensures single instance of shared resources (store, dispatcher).
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize container with all domain sub-containers.

        Args:
            settings: Optional settings (overrides the global settings)
        """
        # Base container with singletons
        self._base = BaseContainer(settings)

        # Domain containers
        self._appointments = AppointmentsContainer(self._base)

        logger.info("DependencyContainer initialized with all domain containers")

    @property
    def settings(self) -> Settings:
        return self._base.settings

    @property
    def base(self) -> BaseContainer:
        return self._base

    @property
    def appointments(self) -> AppointmentsContainer:
        return self._appointments

    def get_config(self) -> dict:
        return self._base.get_config()

    # ============================================================
    # SHARED (delegated to BaseContainer)
    # ============================================================

    def create_unit_of_work(self) -> IUnitOfWork:
        return self._base.create_unit_of_work()

    def get_notification_dispatcher(self) -> INotificationDispatcher:
        return self._base.get_notification_dispatcher()

    def get_auth_provider(self) -> IAuthProvider:
        return self._base.get_auth_provider()

    # ============================================================
    # APPOINTMENTS DOMAIN (delegated to AppointmentsContainer)
    # ============================================================

    def create_slot_source(self, db=None) -> ISlotSource:
        return self._appointments.create_slot_source(db)

    def create_book_appointment_use_case(self):
        return self._appointments.create_book_appointment_use_case()

    def create_list_appointments_use_case(self):
        return self._appointments.create_list_appointments_use_case()

    def create_get_appointment_use_case(self):
        return self._appointments.create_get_appointment_use_case()

    def create_update_appointment_status_use_case(self):
        return self._appointments.create_update_appointment_status_use_case()

    def create_cancel_appointment_use_case(self):
        return self._appointments.create_cancel_appointment_use_case()

    def create_list_free_slots_use_case(self):
        return self._appointments.create_list_free_slots_use_case()


# ============================================================
# GLOBAL CONTAINER
# ============================================================

_container: DependencyContainer | None = None


def get_container() -> DependencyContainer:
    """
    Get global DependencyContainer instance (singleton).

    Returns:
        DependencyContainer instance
    """
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def set_container(container: DependencyContainer) -> None:
    """Install a pre-built container as the global instance."""
    global _container
    _container = container


def reset_container() -> None:
    """Reset global container (useful for testing)."""
    global _container
    logger.info("Resetting global DependencyContainer")
    _container = None


__all__ = [
    # Main container
    "DependencyContainer",
    # Global functions
    "get_container",
    "set_container",
    "reset_container",
    # Sub-containers (for advanced usage)
    "BaseContainer",
    "AppointmentsContainer",
]
