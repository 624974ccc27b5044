"""
Appointments Domain Services

Domain logic that spans entities or has no natural home on one of them.
"""

from app.domains.appointments.domain.services.authorization import AuthorizationGate
from app.domains.appointments.domain.services.notifications import NotificationComposer
from app.domains.appointments.domain.services.state_machine import AppointmentStateMachine

__all__ = [
    "AppointmentStateMachine",
    "AuthorizationGate",
    "NotificationComposer",
]
