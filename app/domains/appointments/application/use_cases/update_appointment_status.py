"""
Update Appointment Status Use Case

Doctor-driven status changes: confirm, complete, no-show and cancel.
"""

import logging
from dataclasses import dataclass, field

from app.core.domain import (
    DomainException,
    EntityNotFoundException,
    InternalException,
    ValidationException,
)
from app.domains.appointments.application.ports.collaborators import INotificationDispatcher
from app.domains.appointments.application.ports.unit_of_work import UnitOfWorkFactory
from app.domains.appointments.application.use_cases.cancel_appointment import cancel_within_unit
from app.domains.appointments.application.use_cases.dispatch import hand_off_notifications
from app.domains.appointments.domain.entities.appointment import Appointment
from app.domains.appointments.domain.entities.notification import Notification
from app.domains.appointments.domain.services.authorization import AuthorizationGate
from app.domains.appointments.domain.services.notifications import NotificationComposer
from app.domains.appointments.domain.services.state_machine import AppointmentStateMachine
from app.domains.appointments.domain.value_objects.appointment_status import (
    AppointmentOperation,
    AppointmentStatus,
    Principal,
)

logger = logging.getLogger(__name__)


@dataclass
class UpdateAppointmentStatusRequest:
    """Request for updating an appointment status."""

    principal: Principal
    appointment_id: int
    new_status: AppointmentStatus
    notes: str | None = None
    prescription: str | None = None


@dataclass
class UpdateAppointmentStatusResponse:
    """Response from updating an appointment status."""

    appointment: Appointment
    previous_status: AppointmentStatus
    notifications: list[Notification] = field(default_factory=list)


class UpdateAppointmentStatusUseCase:
    """
    Use case for appointment status updates.

    A change to cancelled goes through the cancellation path so the slot is
    released in the same unit. Any other change keeps the slot booked and
    notifies the patient with a status-specific message.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        dispatcher: INotificationDispatcher | None = None,
        gate: AuthorizationGate | None = None,
        state_machine: AppointmentStateMachine | None = None,
        composer: NotificationComposer | None = None,
    ):
        self.uow_factory = uow_factory
        self.dispatcher = dispatcher
        self.gate = gate or AuthorizationGate()
        self.state_machine = state_machine or AppointmentStateMachine()
        self.composer = composer or NotificationComposer()

    async def execute(self, request: UpdateAppointmentStatusRequest) -> UpdateAppointmentStatusResponse:
        """
        Execute status update.

        Raises:
            ValidationException: Target status is scheduled
            EntityNotFoundException: Appointment does not exist
            AuthorizationException: Requester may not update this appointment
            InvalidStateException: Transition not allowed from the current status
            InternalException: Unexpected failure, the unit was rolled back
        """
        if request.new_status == AppointmentStatus.SCHEDULED:
            raise ValidationException("Status cannot be set back to scheduled", field="status")

        principal = request.principal

        try:
            async with self.uow_factory() as uow:
                appointment = await uow.appointments.find_by_id(request.appointment_id, for_update=True)
                if appointment is None:
                    raise EntityNotFoundException("Appointment", request.appointment_id)

                self.gate.ensure_can_access(principal, appointment, AppointmentOperation.UPDATE_STATUS)
                previous_status = appointment.status

                if request.new_status == AppointmentStatus.CANCELLED:
                    appointment.record_clinical_notes(request.notes, request.prescription)
                    notifications = await cancel_within_unit(
                        uow, principal, appointment, self.state_machine, self.composer
                    )
                else:
                    self.state_machine.apply(principal, appointment, request.new_status)
                    appointment.record_clinical_notes(request.notes, request.prescription)
                    appointment = await uow.appointments.save(appointment)
                    notifications = [self.composer.status_update(appointment)]

                await uow.commit()

        except DomainException as e:
            logger.warning(f"Status update of appointment {request.appointment_id} rejected: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error updating appointment {request.appointment_id}: {e}", exc_info=True)
            raise InternalException("update appointment status", e) from e

        logger.info(
            f"Appointment {appointment.id} status {previous_status.value} -> {appointment.status.value} "
            f"by {principal.role.value} {principal.user_id}"
        )

        await hand_off_notifications(self.dispatcher, notifications)
        return UpdateAppointmentStatusResponse(
            appointment=appointment,
            previous_status=previous_status,
            notifications=notifications,
        )
