"""
Notification Dispatchers

Sinks that receive notification records once an operation has committed.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.domains.appointments.application.ports.collaborators import INotificationDispatcher
from app.domains.appointments.domain.entities.notification import Notification
from app.domains.appointments.infrastructure.persistence.sqlalchemy.models import NotificationModel

logger = logging.getLogger(__name__)


class LoggingNotificationDispatcher(INotificationDispatcher):
    """Writes notifications to the application log."""

    async def send(self, notification: Notification) -> None:
        logger.info(
            f"[notification] to={notification.recipient_id} type={notification.type.value} "
            f"appointment={notification.related_appointment_id} title={notification.title!r}"
        )


class InMemoryNotificationDispatcher(INotificationDispatcher):
    """Keeps every notification in a list (tests, local development)."""

    def __init__(self):
        self.sent: list[Notification] = []

    async def send(self, notification: Notification) -> None:
        self.sent.append(notification)

    def for_recipient(self, recipient_id: int) -> list[Notification]:
        return [n for n in self.sent if n.recipient_id == recipient_id]

    def clear(self) -> None:
        self.sent.clear()


class DatabaseNotificationDispatcher(INotificationDispatcher):
    """
    Persists notifications into the `notifications` table.

    Uses its own short-lived session, separate from the unit of work that
    produced the notification.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def send(self, notification: Notification) -> None:
        async with self.session_factory() as session:
            try:
                session.add(
                    NotificationModel(
                        user_id=notification.recipient_id,
                        type=notification.type,
                        title=notification.title,
                        message=notification.message,
                        related_appointment_id=notification.related_appointment_id,
                        is_read=False,
                        created_at=notification.created_at,
                    )
                )
                await session.commit()
            except Exception as e:
                logger.error(f"Error persisting notification for user {notification.recipient_id}: {e}")
                await session.rollback()
                raise
