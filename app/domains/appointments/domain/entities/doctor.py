"""
Doctor Entity for Appointments Domain

Represents a bookable professional: supported consultation modes, fee and availability.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from app.core.domain import Entity

from ..value_objects.appointment_status import ConsultationMode


@dataclass
class Doctor(Entity[int]):
    """
    Doctor entity for the appointments domain.

    Example:
        ```python
        doctor = Doctor(
            id=7,
            user_id=42,
            first_name="Ana",
            last_name="Pérez",
            consultation_modes={ConsultationMode.ONLINE, ConsultationMode.OFFLINE},
            consultation_fee=Decimal("50.00"),
        )
        doctor.supports_mode(ConsultationMode.ONLINE)  # True
        ```
    """

    # Owning user account (used for authorization and notifications)
    user_id: int = 0

    first_name: str = ""
    last_name: str = ""
    specialization: str | None = None

    # Booking attributes
    consultation_modes: set[ConsultationMode] = field(
        default_factory=lambda: {ConsultationMode.ONLINE, ConsultationMode.OFFLINE}
    )
    consultation_fee: Decimal = Decimal("0.00")
    is_available: bool = True

    @property
    def full_name(self) -> str:
        """Get full name with title."""
        return f"Dr. {self.first_name} {self.last_name}".strip()

    def supports_mode(self, mode: ConsultationMode) -> bool:
        """Check if doctor offers the given consultation mode."""
        return mode in self.consultation_modes

    def can_accept_appointments(self) -> bool:
        """Check if doctor can accept new appointments."""
        return self.is_available

    def set_consultation_fee(self, fee: Decimal) -> None:
        """Set consultation fee. Existing appointments keep their snapshot."""
        if fee < 0:
            raise ValueError("Fee cannot be negative")
        self.consultation_fee = fee
        self.touch()

