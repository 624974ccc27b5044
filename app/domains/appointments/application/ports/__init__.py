"""
Appointments Domain Ports

Interfaces (ports) for the appointments domain following Clean Architecture.
"""

from app.domains.appointments.application.ports.appointment_repository import IAppointmentRepository
from app.domains.appointments.application.ports.collaborators import (
    IAuthProvider,
    INotificationDispatcher,
    ISlotSource,
    SlotSpec,
)
from app.domains.appointments.application.ports.doctor_repository import IDoctorRepository
from app.domains.appointments.application.ports.slot_registry import ISlotRegistry
from app.domains.appointments.application.ports.unit_of_work import IUnitOfWork, UnitOfWorkFactory

__all__ = [
    "ISlotRegistry",
    "IAppointmentRepository",
    "IDoctorRepository",
    "IUnitOfWork",
    "UnitOfWorkFactory",
    "IAuthProvider",
    "INotificationDispatcher",
    "ISlotSource",
    "SlotSpec",
]
