"""
Appointment Read Use Cases

Role-scoped listing and single appointment retrieval.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from app.core.domain import DomainException, EntityNotFoundException, InternalException
from app.domains.appointments.application.ports.unit_of_work import UnitOfWorkFactory
from app.domains.appointments.domain.entities.appointment import Appointment
from app.domains.appointments.domain.services.authorization import AuthorizationGate
from app.domains.appointments.domain.value_objects.appointment_status import (
    AppointmentOperation,
    AppointmentStatus,
    Principal,
    Role,
)

logger = logging.getLogger(__name__)


@dataclass
class ListAppointmentsRequest:
    """Request for listing appointments."""

    principal: Principal
    status: AppointmentStatus | None = None
    upcoming_only: bool = False


@dataclass
class ListAppointmentsResponse:
    """Response with the appointments visible to the principal."""

    appointments: list[Appointment] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.appointments)


class ListAppointmentsUseCase:
    """
    Use case for listing appointments.

    Patients see their own appointments, doctors the appointments booked
    with them, admins every appointment. Results are ordered newest first.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, today: Callable[[], date] = date.today):
        self.uow_factory = uow_factory
        self.today = today

    async def execute(self, request: ListAppointmentsRequest) -> ListAppointmentsResponse:
        principal = request.principal

        patient_id = principal.user_id if principal.role == Role.PATIENT else None
        doctor_user_id = principal.user_id if principal.role == Role.DOCTOR else None
        from_date = self.today() if request.upcoming_only else None

        try:
            async with self.uow_factory() as uow:
                appointments = await uow.appointments.find_many(
                    patient_id=patient_id,
                    doctor_user_id=doctor_user_id,
                    status=request.status,
                    from_date=from_date,
                )
        except Exception as e:
            logger.error(f"Error listing appointments for user {principal.user_id}: {e}", exc_info=True)
            raise InternalException("list appointments", e) from e

        return ListAppointmentsResponse(appointments=appointments)


@dataclass
class GetAppointmentRequest:
    """Request for a single appointment."""

    principal: Principal
    appointment_id: int


@dataclass
class GetAppointmentResponse:
    """Response with a single appointment."""

    appointment: Appointment


class GetAppointmentUseCase:
    """Use case for reading one appointment (participants and admins only)."""

    def __init__(self, uow_factory: UnitOfWorkFactory, gate: AuthorizationGate | None = None):
        self.uow_factory = uow_factory
        self.gate = gate or AuthorizationGate()

    async def execute(self, request: GetAppointmentRequest) -> GetAppointmentResponse:
        """
        Raises:
            EntityNotFoundException: Appointment does not exist
            AuthorizationException: Requester is not a participant or admin
        """
        try:
            async with self.uow_factory() as uow:
                appointment = await uow.appointments.find_by_id(request.appointment_id)
        except Exception as e:
            logger.error(f"Error fetching appointment {request.appointment_id}: {e}", exc_info=True)
            raise InternalException("fetch appointment", e) from e

        if appointment is None:
            raise EntityNotFoundException("Appointment", request.appointment_id)

        try:
            self.gate.ensure_can_access(request.principal, appointment, AppointmentOperation.READ)
        except DomainException:
            logger.warning(
                f"User {request.principal.user_id} denied read access to appointment {request.appointment_id}"
            )
            raise

        return GetAppointmentResponse(appointment=appointment)
