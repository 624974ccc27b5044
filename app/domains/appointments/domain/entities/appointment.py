"""
Appointment Entity for Appointments Domain

Represents a reservation of one doctor time slot by one patient, with status tracking.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from decimal import Decimal

from app.core.domain import AggregateRoot, InvalidStateException

from ..value_objects.appointment_status import (
    AppointmentStatus,
    ConsultationMode,
    PaymentStatus,
    Role,
    SlotKey,
)
from .doctor import Doctor
from .time_slot import TimeSlot


@dataclass
class Appointment(AggregateRoot[int]):
    """
    Appointment aggregate root for appointments domain.

    The consultation fee is copied from the doctor when the appointment is
    created and never follows later fee changes.

    Example:
        ```python
        appointment = Appointment.schedule(
            patient_id=10,
            doctor=doctor,
            slot=slot,
            mode=ConsultationMode.ONLINE,
            reason="Follow-up",
        )
        appointment.confirm()
        appointment.complete(notes="All good")
        ```
    """

    # References
    patient_id: int = 0
    doctor_id: int = 0
    doctor_user_id: int = 0
    slot_id: int | None = None
    doctor_name: str = ""

    # Scheduling
    appointment_date: date | None = None
    appointment_time: time | None = None
    duration_minutes: int = 30
    consultation_mode: ConsultationMode = ConsultationMode.OFFLINE

    # Status
    status: AppointmentStatus = AppointmentStatus.SCHEDULED

    # Clinical information
    reason: str | None = None
    notes: str | None = None
    prescription: str | None = None

    # Billing
    consultation_fee: Decimal = Decimal("0.00")
    payment_status: PaymentStatus = PaymentStatus.PENDING

    # Timestamps
    confirmed_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None

    # Cancellation
    cancelled_by: Role | None = None

    @classmethod
    def schedule(
        cls,
        patient_id: int,
        doctor: Doctor,
        slot: TimeSlot,
        mode: ConsultationMode,
        reason: str | None = None,
    ) -> "Appointment":
        """Create a scheduled appointment for a reserved slot."""
        return cls(
            patient_id=patient_id,
            doctor_id=slot.doctor_id,
            doctor_user_id=doctor.user_id,
            doctor_name=doctor.full_name,
            slot_id=slot.id,
            appointment_date=slot.slot_date,
            appointment_time=slot.slot_time,
            duration_minutes=slot.duration_minutes,
            consultation_mode=mode,
            reason=reason,
            consultation_fee=doctor.consultation_fee,
            status=AppointmentStatus.SCHEDULED,
            payment_status=PaymentStatus.PENDING,
        )

    @property
    def slot_key(self) -> SlotKey:
        """Get the key of the slot this appointment occupies."""
        if self.appointment_date is None or self.appointment_time is None:
            raise ValueError("Appointment date and time are required")
        return SlotKey(
            doctor_id=self.doctor_id,
            slot_date=self.appointment_date,
            slot_time=self.appointment_time,
        )

    @property
    def datetime_start(self) -> datetime | None:
        """Get start as datetime."""
        if self.appointment_date and self.appointment_time:
            return datetime.combine(self.appointment_date, self.appointment_time)
        return None

    # Status Transitions

    def _ensure_can_move_to(self, new_status: AppointmentStatus, operation: str) -> None:
        if not self.status.can_transition_to(new_status):
            raise InvalidStateException(
                operation=operation,
                current_state=self.status.value,
            )

    def confirm(self) -> None:
        """Confirm the appointment."""
        self._ensure_can_move_to(AppointmentStatus.CONFIRMED, "confirm")

        self.status = AppointmentStatus.CONFIRMED
        self.confirmed_at = datetime.now(UTC)
        self.touch()

    def complete(self) -> None:
        """Complete the appointment."""
        self._ensure_can_move_to(AppointmentStatus.COMPLETED, "complete")

        self.status = AppointmentStatus.COMPLETED
        self.completed_at = datetime.now(UTC)
        self.touch()

    def mark_no_show(self) -> None:
        """Mark patient as no-show."""
        self._ensure_can_move_to(AppointmentStatus.NO_SHOW, "mark_no_show")

        self.status = AppointmentStatus.NO_SHOW
        self.touch()

    def cancel(self, cancelled_by: Role) -> None:
        """Cancel the appointment."""
        if not self.status.can_be_cancelled():
            raise InvalidStateException(
                operation="cancel",
                current_state=self.status.value,
                message=f"Cannot cancel appointment in state '{self.status.value}'",
            )

        self.status = AppointmentStatus.CANCELLED
        self.cancelled_at = datetime.now(UTC)
        self.cancelled_by = cancelled_by
        self.touch()

    # Clinical Information

    def record_clinical_notes(self, notes: str | None = None, prescription: str | None = None) -> None:
        """Attach notes and/or a prescription; None leaves the current value."""
        if notes is not None:
            self.notes = notes
        if prescription is not None:
            self.prescription = prescription
        if notes is not None or prescription is not None:
            self.touch()

