"""
Appointments Domain Value Objects

Status enums and value objects for the appointments domain.
"""

from dataclasses import dataclass
from datetime import date, time

from app.core.domain import StatusEnum, ValueObject


class AppointmentStatus(StatusEnum):
    """
    Appointment lifecycle states.

    Valid transitions:
    - SCHEDULED -> CONFIRMED, CANCELLED, NO_SHOW, COMPLETED
    - CONFIRMED -> COMPLETED, CANCELLED, NO_SHOW
    - COMPLETED -> (terminal)
    - CANCELLED -> (terminal)
    - NO_SHOW -> (terminal)
    """

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"

    def can_transition_to(self, new_status: "AppointmentStatus") -> bool:
        """Check if transition to new status is valid."""
        return new_status.value in _TRANSITIONS.get(self.value, ())

    def is_terminal(self) -> bool:
        """Check if this is a terminal state."""
        return not _TRANSITIONS.get(self.value)

    def can_be_cancelled(self) -> bool:
        """Check if appointment can be cancelled."""
        return self.value in ("scheduled", "confirmed")


_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "scheduled": ("confirmed", "cancelled", "no_show", "completed"),
    "confirmed": ("completed", "cancelled", "no_show"),
    "completed": (),
    "cancelled": (),
    "no_show": (),
}


class ConsultationMode(StatusEnum):
    """How a consultation takes place."""

    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


class PaymentStatus(StatusEnum):
    """Payment state of an appointment fee."""

    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class Role(StatusEnum):
    """Role of an authenticated principal."""

    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class NotificationType(StatusEnum):
    """Kinds of notification emitted by appointment operations."""

    CONFIRMATION = "confirmation"
    NEW_APPOINTMENT = "new_appointment"
    STATUS_UPDATE = "status_update"
    CANCELLATION = "cancellation"


class AppointmentOperation(StatusEnum):
    """Operations checked by the authorization gate."""

    READ = "read"
    UPDATE_STATUS = "update_status"
    CANCEL = "cancel"


@dataclass(frozen=True)
class SlotKey(ValueObject):
    """
    Identity of a bookable slot.

    A doctor has at most one slot per (date, time).
    """

    doctor_id: int
    slot_date: date
    slot_time: time

    def _validate(self) -> None:
        if self.doctor_id <= 0:
            raise ValueError("Doctor ID must be positive")

    def __str__(self) -> str:
        return f"{self.slot_date.isoformat()} {self.slot_time.strftime('%H:%M')}"


@dataclass(frozen=True)
class Principal(ValueObject):
    """Authenticated caller, as supplied by the auth provider."""

    user_id: int
    role: Role
    email: str | None = None
    name: str | None = None

    def _validate(self) -> None:
        if self.user_id <= 0:
            raise ValueError("User ID must be positive")

    @property
    def is_patient(self) -> bool:
        return self.role == Role.PATIENT

    @property
    def is_doctor(self) -> bool:
        return self.role == Role.DOCTOR

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
