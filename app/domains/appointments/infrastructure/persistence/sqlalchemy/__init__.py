"""
Appointments SQLAlchemy persistence
"""

from app.domains.appointments.infrastructure.persistence.sqlalchemy.models import (
    AppointmentModel,
    DoctorModel,
    NotificationModel,
    TimeSlotModel,
)

__all__ = [
    "DoctorModel",
    "TimeSlotModel",
    "AppointmentModel",
    "NotificationModel",
]
