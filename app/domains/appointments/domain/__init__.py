"""
Appointments Domain Layer

Core business logic for the Appointments bounded context.

Components:
- Entities: Doctor, TimeSlot, Appointment (aggregate root), Notification
- Value Objects: AppointmentStatus, ConsultationMode, Role, SlotKey, Principal
- Domain Services: AppointmentStateMachine, AuthorizationGate, NotificationComposer
"""

from app.domains.appointments.domain.entities import (
    Appointment,
    Doctor,
    Notification,
    TimeSlot,
)
from app.domains.appointments.domain.services import (
    AppointmentStateMachine,
    AuthorizationGate,
    NotificationComposer,
)
from app.domains.appointments.domain.value_objects import (
    AppointmentOperation,
    AppointmentStatus,
    ConsultationMode,
    NotificationType,
    PaymentStatus,
    Principal,
    Role,
    SlotKey,
)

__all__ = [
    # Entities
    "Doctor",
    "TimeSlot",
    "Appointment",
    "Notification",
    # Value Objects
    "AppointmentStatus",
    "ConsultationMode",
    "PaymentStatus",
    "Role",
    "NotificationType",
    "AppointmentOperation",
    "SlotKey",
    "Principal",
    # Services
    "AppointmentStateMachine",
    "AuthorizationGate",
    "NotificationComposer",
]
