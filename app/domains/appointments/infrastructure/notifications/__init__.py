"""
Notification dispatchers for the appointments domain
"""

from app.domains.appointments.infrastructure.notifications.dispatchers import (
    DatabaseNotificationDispatcher,
    InMemoryNotificationDispatcher,
    LoggingNotificationDispatcher,
)

__all__ = [
    "LoggingNotificationDispatcher",
    "InMemoryNotificationDispatcher",
    "DatabaseNotificationDispatcher",
]
