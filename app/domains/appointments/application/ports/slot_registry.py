"""
Slot Registry Port

Interface for the bookable slot set following Clean Architecture.
"""

from collections.abc import AsyncIterable
from datetime import date
from typing import Protocol, runtime_checkable

from app.domains.appointments.domain.entities.time_slot import TimeSlot
from app.domains.appointments.domain.value_objects.appointment_status import SlotKey


@runtime_checkable
class ISlotRegistry(Protocol):
    """
    Slot registry interface.

    Owns the free/booked state of every slot. Implementations must make
    `reserve` a check-and-set: of several concurrent callers for the same
    key exactly one observes success.

    Example:
        ```python
        slot = await registry.reserve(SlotKey(doctor_id=1, slot_date=d, slot_time=t))
        ...
        await registry.release(slot.id)
        ```
    """

    async def reserve(self, key: SlotKey) -> TimeSlot:
        """
        Atomically mark a free slot as booked.

        Args:
            key: (doctor, date, time) of the slot

        Returns:
            The reserved slot

        Raises:
            SlotConflictException: If no slot exists for key or it is already booked
        """
        ...

    async def release(self, slot_id: int) -> None:
        """
        Mark a slot as free.

        Idempotent: releasing a free or unknown slot is a no-op.

        Args:
            slot_id: Slot identifier
        """
        ...

    def lookup(self, doctor_id: int, date_from: date, date_to: date) -> AsyncIterable[TimeSlot]:
        """
        Lazily iterate the free slots of a doctor in a date range.

        The returned iterable re-reads the registry each time it is iterated.

        Args:
            doctor_id: Doctor ID
            date_from: First date (inclusive)
            date_to: Last date (inclusive)

        Returns:
            Async iterable of free slots ordered by date and time
        """
        ...

    async def find_by_id(self, slot_id: int) -> TimeSlot | None:
        """
        Find slot by ID.

        Args:
            slot_id: Slot identifier

        Returns:
            TimeSlot if found, None otherwise
        """
        ...
