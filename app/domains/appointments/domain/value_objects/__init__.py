"""
Appointments Domain Value Objects

Immutable value objects for the appointments domain.
"""

from app.domains.appointments.domain.value_objects.appointment_status import (
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
    "AppointmentStatus",
    "ConsultationMode",
    "PaymentStatus",
    "Role",
    "NotificationType",
    "AppointmentOperation",
    "SlotKey",
    "Principal",
]
