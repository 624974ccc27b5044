"""
Appointment State Machine

Legal status transitions and the actor allowed to trigger each of them.
"""

import logging

from app.core.domain import AuthorizationException, InvalidStateException

from ..entities.appointment import Appointment
from ..value_objects.appointment_status import AppointmentStatus, Principal

logger = logging.getLogger(__name__)

# Statuses only the owning doctor may set
DOCTOR_DRIVEN_STATUSES = frozenset(
    {
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.COMPLETED,
        AppointmentStatus.NO_SHOW,
    }
)


class AppointmentStateMachine:
    """
    Drives an appointment through its lifecycle.

    Transitions:
    - scheduled -> confirmed | completed | no_show | cancelled
    - confirmed -> completed | no_show | cancelled
    - completed, cancelled, no_show are terminal

    Guards:
    - confirmed / completed / no_show: owning doctor (and admin when
      allow_admin_status_updates is enabled)
    - cancelled: owning patient, owning doctor or admin

    The target state is validated before the actor, so any attempt to leave a
    terminal state fails with InvalidStateException regardless of who asks.
    """

    def __init__(self, allow_admin_status_updates: bool = False):
        self.allow_admin_status_updates = allow_admin_status_updates

    def can_transition(self, current: AppointmentStatus, target: AppointmentStatus) -> bool:
        return current.can_transition_to(target)

    def is_permitted_actor(self, principal: Principal, appointment: Appointment, target: AppointmentStatus) -> bool:
        """Check the actor guard for a target status."""
        is_owning_doctor = principal.is_doctor and principal.user_id == appointment.doctor_user_id

        if target in DOCTOR_DRIVEN_STATUSES:
            return is_owning_doctor or (self.allow_admin_status_updates and principal.is_admin)

        if target == AppointmentStatus.CANCELLED:
            is_owning_patient = principal.is_patient and principal.user_id == appointment.patient_id
            return is_owning_patient or is_owning_doctor or principal.is_admin

        return False

    def validate(self, principal: Principal, appointment: Appointment, target: AppointmentStatus) -> None:
        """
        Validate a transition without applying it.

        Raises:
            InvalidStateException: If the current status cannot move to target
            AuthorizationException: If the principal may not trigger the transition
        """
        if not self.can_transition(appointment.status, target):
            raise InvalidStateException(
                operation=f"transition to {target.value}",
                current_state=appointment.status.value,
                message=f"Cannot change status from '{appointment.status.value}' to '{target.value}'",
            )

        if not self.is_permitted_actor(principal, appointment, target):
            raise AuthorizationException(
                operation=f"transition to {target.value}",
                resource=f"appointment:{appointment.id}",
                user_id=principal.user_id,
            )

    def apply(self, principal: Principal, appointment: Appointment, target: AppointmentStatus) -> AppointmentStatus:
        """
        Validate and apply a transition on the appointment.

        Returns:
            The status the appointment held before the transition
        """
        self.validate(principal, appointment, target)
        previous = appointment.status

        if target == AppointmentStatus.CONFIRMED:
            appointment.confirm()
        elif target == AppointmentStatus.COMPLETED:
            appointment.complete()
        elif target == AppointmentStatus.NO_SHOW:
            appointment.mark_no_show()
        else:
            appointment.cancel(cancelled_by=principal.role)

        logger.debug(f"Appointment {appointment.id}: {previous.value} -> {target.value} by {principal.role.value}")
        return previous
