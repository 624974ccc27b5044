"""
In-memory backend for the appointments domain
"""

from app.domains.appointments.infrastructure.memory.store import (
    InMemoryAppointmentRepository,
    InMemoryDoctorRepository,
    InMemorySlotRegistry,
    InMemorySlotSource,
    InMemoryStore,
    InMemoryUnitOfWork,
)

__all__ = [
    "InMemoryStore",
    "InMemoryUnitOfWork",
    "InMemorySlotRegistry",
    "InMemoryAppointmentRepository",
    "InMemoryDoctorRepository",
    "InMemorySlotSource",
]
