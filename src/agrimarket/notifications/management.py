"""Notification log management: commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from agrimarket.domain import agrimarket
from agrimarket.notifications.notification import Notification

logger = structlog.get_logger(__name__)


@agrimarket.command(part_of="Notification")
class RecordNotification:
    order_id: Identifier()
    user_id: Identifier()
    message: Text(required=True)
    notification_type: String(max_length=20)


@agrimarket.command(part_of="Notification")
class MarkNotificationRead:
    notification_id: Identifier(required=True)


@agrimarket.command(part_of="Notification")
class ClearReadNotifications:
    pass


@agrimarket.command_handler(part_of=Notification)
class NotificationLogHandler:
    @handle(RecordNotification)
    def record_notification(self, command):
        notification = Notification.record(
            message=command.message,
            order_id=command.order_id,
            user_id=command.user_id,
            notification_type=command.notification_type,
        )
        current_domain.repository_for(Notification).add(notification)
        return notification.to_dict()

    @handle(MarkNotificationRead)
    def mark_notification_read(self, command):
        """Mark the notification read, drop it from the log and return its final state."""
        repo = current_domain.repository_for(Notification)
        notification = repo.get_or_none(command.notification_id)
        if notification is None:
            raise ObjectNotFoundError("Notification not found")

        notification.mark_read()
        repo._dao.delete(notification)
        return notification.to_dict()

    @handle(ClearReadNotifications)
    def clear_read_notifications(self, command):
        repo = current_domain.repository_for(Notification)
        read = repo.read()
        for notification in read:
            repo._dao.delete(notification)
        logger.info("read_notifications_cleared", count=len(read))
        return len(read)
