"""
Notification hand-off shared by the mutating use cases.
"""

import logging

from app.domains.appointments.application.ports.collaborators import INotificationDispatcher
from app.domains.appointments.domain.entities.notification import Notification

logger = logging.getLogger(__name__)


async def hand_off_notifications(
    dispatcher: INotificationDispatcher | None,
    notifications: list[Notification],
) -> int:
    """
    Send notifications after the unit of work has committed.

    Delivery failures are logged and never change the outcome of the
    operation that produced the notifications.

    Returns:
        Number of notifications accepted by the dispatcher
    """
    if dispatcher is None:
        return 0

    sent = 0
    for notification in notifications:
        try:
            await dispatcher.send(notification)
            sent += 1
        except Exception as e:
            logger.error(
                f"Error dispatching {notification.type.value} notification "
                f"to user {notification.recipient_id}: {e}",
                exc_info=True,
            )
    return sent
