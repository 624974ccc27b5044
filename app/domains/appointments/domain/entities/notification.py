"""
Notification Value for Appointments Domain

Immutable record handed to the notification dispatcher.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from app.core.domain import ValueObject

from ..value_objects.appointment_status import NotificationType


@dataclass(frozen=True)
class Notification(ValueObject):
    """
    A notification produced as a side effect of an appointment operation.

    Ownership passes to the dispatcher as soon as it is handed off.
    """

    recipient_id: int
    type: NotificationType
    title: str
    message: str
    related_appointment_id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def _validate(self) -> None:
        if self.recipient_id <= 0:
            raise ValueError("Recipient ID must be positive")
        if not self.title:
            raise ValueError("Notification title is required")

