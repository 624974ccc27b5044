"""
Appointments Domain Entities

Business entities with identity and lifecycle for the appointments domain.
"""

from app.domains.appointments.domain.entities.appointment import Appointment
from app.domains.appointments.domain.entities.doctor import Doctor
from app.domains.appointments.domain.entities.notification import Notification
from app.domains.appointments.domain.entities.time_slot import TimeSlot

__all__ = [
    "Doctor",
    "TimeSlot",
    "Appointment",
    "Notification",
]
