"""
External Collaborator Ports

Interfaces for identity, notification delivery and slot generation.
"""

from dataclasses import dataclass
from datetime import date, time
from typing import Protocol, runtime_checkable

from app.domains.appointments.domain.entities.notification import Notification
from app.domains.appointments.domain.entities.time_slot import TimeSlot
from app.domains.appointments.domain.value_objects.appointment_status import ConsultationMode, Principal


@runtime_checkable
class IAuthProvider(Protocol):
    """Resolves a credential into the calling principal."""

    async def verify(self, credential: str) -> Principal:
        """
        Verify a credential.

        Args:
            credential: Opaque credential (e.g. a bearer token)

        Returns:
            The authenticated principal

        Raises:
            AuthenticationException: If the credential is invalid or expired
        """
        ...


@runtime_checkable
class INotificationDispatcher(Protocol):
    """Fire-and-forget sink for notification records."""

    async def send(self, notification: Notification) -> None:
        """
        Hand a notification off for delivery.

        Args:
            notification: Immutable notification record
        """
        ...


@dataclass
class SlotSpec:
    """One slot to be created by a slot source."""

    slot_date: date
    slot_time: time
    duration_minutes: int = 30
    consultation_mode: ConsultationMode | None = None


@runtime_checkable
class ISlotSource(Protocol):
    """Creates bookable slots for a doctor."""

    async def create_slots(self, doctor_id: int, schedule: list[SlotSpec]) -> list[TimeSlot]:
        """
        Create free slots.

        Args:
            doctor_id: Doctor ID
            schedule: Slots to create

        Returns:
            Created slots with IDs

        Raises:
            DuplicateEntityException: If a (doctor, date, time) slot already exists
        """
        ...
