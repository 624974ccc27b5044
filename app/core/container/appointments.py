"""
Appointments Domain Container.

Single Responsibility: Wire all appointments domain dependencies.
"""

import logging
from typing import TYPE_CHECKING

from app.domains.appointments.application.ports import ISlotSource
from app.domains.appointments.application.use_cases import (
    BookAppointmentUseCase,
    CancelAppointmentUseCase,
    GetAppointmentUseCase,
    ListAppointmentsUseCase,
    ListFreeSlotsUseCase,
    UpdateAppointmentStatusUseCase,
)
from app.domains.appointments.domain.services import (
    AppointmentStateMachine,
    AuthorizationGate,
    NotificationComposer,
)
from app.domains.appointments.infrastructure.memory import InMemorySlotSource
from app.domains.appointments.infrastructure.repositories import SQLAlchemySlotSource

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from app.core.container.base import BaseContainer

logger = logging.getLogger(__name__)


class AppointmentsContainer:
    """
    Appointments domain container.

    Single Responsibility: Create domain services and use cases.
    """

    def __init__(self, base: "BaseContainer"):
        """
        Initialize appointments container.

        Args:
            base: BaseContainer with shared singletons
        """
        self._base = base
        admin_updates = base.settings.APPOINTMENTS_ADMIN_STATUS_UPDATES
        self._gate = AuthorizationGate(allow_admin_status_updates=admin_updates)
        self._state_machine = AppointmentStateMachine(allow_admin_status_updates=admin_updates)
        self._composer = NotificationComposer()

    # ==================== DOMAIN SERVICES ====================

    def get_authorization_gate(self) -> AuthorizationGate:
        return self._gate

    def get_state_machine(self) -> AppointmentStateMachine:
        return self._state_machine

    # ==================== SLOT SOURCE ====================

    def create_slot_source(self, db: "AsyncSession | None" = None) -> ISlotSource:
        """Create slot source for the configured backend (db required for postgres)."""
        if self._base.uses_memory_storage:
            return InMemorySlotSource(self._base.get_memory_store())
        if db is None:
            raise ValueError("A database session is required for the postgres slot source")
        return SQLAlchemySlotSource(session=db)

    # ==================== USE CASES ====================

    def create_book_appointment_use_case(self) -> BookAppointmentUseCase:
        """Create BookAppointmentUseCase with dependencies."""
        return BookAppointmentUseCase(
            uow_factory=self._base.create_unit_of_work,
            dispatcher=self._base.get_notification_dispatcher(),
            composer=self._composer,
            reason_max_length=self._base.settings.APPOINTMENT_REASON_MAX_LENGTH,
        )

    def create_list_appointments_use_case(self) -> ListAppointmentsUseCase:
        """Create ListAppointmentsUseCase with dependencies."""
        return ListAppointmentsUseCase(uow_factory=self._base.create_unit_of_work)

    def create_get_appointment_use_case(self) -> GetAppointmentUseCase:
        """Create GetAppointmentUseCase with dependencies."""
        return GetAppointmentUseCase(uow_factory=self._base.create_unit_of_work, gate=self._gate)

    def create_update_appointment_status_use_case(self) -> UpdateAppointmentStatusUseCase:
        """Create UpdateAppointmentStatusUseCase with dependencies."""
        return UpdateAppointmentStatusUseCase(
            uow_factory=self._base.create_unit_of_work,
            dispatcher=self._base.get_notification_dispatcher(),
            gate=self._gate,
            state_machine=self._state_machine,
            composer=self._composer,
        )

    def create_cancel_appointment_use_case(self) -> CancelAppointmentUseCase:
        """Create CancelAppointmentUseCase with dependencies."""
        return CancelAppointmentUseCase(
            uow_factory=self._base.create_unit_of_work,
            dispatcher=self._base.get_notification_dispatcher(),
            gate=self._gate,
            state_machine=self._state_machine,
            composer=self._composer,
        )

    def create_list_free_slots_use_case(self) -> ListFreeSlotsUseCase:
        """Create ListFreeSlotsUseCase with dependencies."""
        return ListFreeSlotsUseCase(uow_factory=self._base.create_unit_of_work)
