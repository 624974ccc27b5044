"""
TimeSlot Entity for Appointments Domain

A fixed-duration bookable unit on a doctor's calendar.
"""

from dataclasses import dataclass
from datetime import date, time

from app.core.domain import Entity

from ..value_objects.appointment_status import ConsultationMode, SlotKey


@dataclass
class TimeSlot(Entity[int]):
    """
    Time slot entity.

    Slots are created by an external scheduler and only ever flip between
    free and booked afterwards.
    """

    doctor_id: int = 0
    slot_date: date | None = None
    slot_time: time | None = None
    duration_minutes: int = 30
    consultation_mode: ConsultationMode | None = None
    is_booked: bool = False

    @property
    def key(self) -> SlotKey:
        """Get the (doctor, date, time) key of this slot."""
        if self.slot_date is None or self.slot_time is None:
            raise ValueError("Slot date and time are required")
        return SlotKey(doctor_id=self.doctor_id, slot_date=self.slot_date, slot_time=self.slot_time)

    def book(self) -> None:
        """Mark the slot booked."""
        self.is_booked = True
        self.touch()

    def release(self) -> None:
        """Mark the slot free. Releasing a free slot is a no-op."""
        if not self.is_booked:
            return
        self.is_booked = False
        self.touch()

