"""
Authorization Gate

Pure ownership / role rules for appointment operations.
"""

from app.core.domain import AuthorizationException

from ..entities.appointment import Appointment
from ..value_objects.appointment_status import AppointmentOperation, Principal, Role


class AuthorizationGate:
    """
    Decides whether a principal may perform an operation on an appointment.

    Rules:
    - read: owning patient, owning doctor, admin
    - update_status: owning doctor (admin only when allow_admin_status_updates)
    - cancel: owning patient, owning doctor, admin

    Holds no state besides the admin flag.
    """

    def __init__(self, allow_admin_status_updates: bool = False):
        self.allow_admin_status_updates = allow_admin_status_updates

    def can_access(
        self,
        principal: Principal,
        appointment: Appointment,
        operation: AppointmentOperation,
    ) -> bool:
        match principal.role:
            case Role.ADMIN:
                if operation == AppointmentOperation.UPDATE_STATUS:
                    return self.allow_admin_status_updates
                return True
            case Role.DOCTOR:
                return principal.user_id == appointment.doctor_user_id
            case Role.PATIENT:
                if operation == AppointmentOperation.UPDATE_STATUS:
                    return False
                return principal.user_id == appointment.patient_id
        return False

    def ensure_can_access(
        self,
        principal: Principal,
        appointment: Appointment,
        operation: AppointmentOperation,
    ) -> None:
        """
        Raise if the principal may not perform the operation.

        Raises:
            AuthorizationException: If access is denied
        """
        if not self.can_access(principal, appointment, operation):
            raise AuthorizationException(
                operation=operation.value,
                resource=f"appointment:{appointment.id}",
                user_id=principal.user_id,
            )
