"""
Cancel Appointment Use Case

Sets an appointment to cancelled and frees its slot in one atomic unit.
"""

import logging
from dataclasses import dataclass, field

from app.core.domain import DomainException, EntityNotFoundException, InternalException
from app.domains.appointments.application.ports.collaborators import INotificationDispatcher
from app.domains.appointments.application.ports.unit_of_work import IUnitOfWork, UnitOfWorkFactory
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
class CancelAppointmentRequest:
    """Request for cancelling an appointment."""

    principal: Principal
    appointment_id: int


@dataclass
class CancelAppointmentResponse:
    """Response from cancelling an appointment."""

    appointment: Appointment
    notifications: list[Notification] = field(default_factory=list)


async def cancel_within_unit(
    uow: IUnitOfWork,
    principal: Principal,
    appointment: Appointment,
    state_machine: AppointmentStateMachine,
    composer: NotificationComposer,
) -> list[Notification]:
    """
    Cancel a loaded appointment inside an open unit of work.

    Status change and slot release are committed together by the caller.

    Returns:
        Cancellation notifications for the non-initiating party
    """
    state_machine.apply(principal, appointment, AppointmentStatus.CANCELLED)

    if appointment.slot_id is not None:
        await uow.slots.release(appointment.slot_id)

    await uow.appointments.save(appointment)
    return composer.cancellation(appointment, cancelled_by=principal.role)


class CancelAppointmentUseCase:
    """
    Use case for cancelling appointments.

    Order of checks: not found, forbidden, invalid state.
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

    async def execute(self, request: CancelAppointmentRequest) -> CancelAppointmentResponse:
        """
        Execute appointment cancellation.

        Raises:
            EntityNotFoundException: Appointment does not exist
            AuthorizationException: Requester is not a participant or admin
            InvalidStateException: Appointment is not scheduled or confirmed
            InternalException: Unexpected failure, the unit was rolled back
        """
        principal = request.principal

        try:
            async with self.uow_factory() as uow:
                appointment = await uow.appointments.find_by_id(request.appointment_id, for_update=True)
                if appointment is None:
                    raise EntityNotFoundException("Appointment", request.appointment_id)

                self.gate.ensure_can_access(principal, appointment, AppointmentOperation.CANCEL)

                notifications = await cancel_within_unit(
                    uow, principal, appointment, self.state_machine, self.composer
                )

                await uow.commit()

        except DomainException as e:
            logger.warning(f"Cancellation of appointment {request.appointment_id} rejected: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error cancelling appointment {request.appointment_id}: {e}", exc_info=True)
            raise InternalException("cancel appointment", e) from e

        logger.info(
            f"Appointment {appointment.id} cancelled by {principal.role.value} {principal.user_id}, "
            f"slot {appointment.slot_id} released"
        )

        await hand_off_notifications(self.dispatcher, notifications)
        return CancelAppointmentResponse(appointment=appointment, notifications=notifications)
