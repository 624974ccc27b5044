"""
Appointments Infrastructure Repositories

Repository implementations for the appointments domain.
"""

from app.domains.appointments.infrastructure.repositories.appointment_repository import (
    SQLAlchemyAppointmentRepository,
)
from app.domains.appointments.infrastructure.repositories.doctor_repository import (
    SQLAlchemyDoctorRepository,
)
from app.domains.appointments.infrastructure.repositories.slot_registry import (
    SQLAlchemySlotRegistry,
    SQLAlchemySlotSource,
)

__all__ = [
    "SQLAlchemySlotRegistry",
    "SQLAlchemySlotSource",
    "SQLAlchemyAppointmentRepository",
    "SQLAlchemyDoctorRepository",
]
