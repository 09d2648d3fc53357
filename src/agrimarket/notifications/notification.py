"""Notification aggregate: the administrator's log of marketplace activity.

A notification lives only until it is read: acknowledging it marks it
read and then removes it from the log.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from agrimarket.domain import agrimarket
from agrimarket.notifications.events import NotificationRecorded


class NotificationType(Enum):
    NEW_ORDER = "new_order"
    PAYMENT_UPDATE = "payment_update"
    STATUS_UPDATE = "status_update"


@agrimarket.aggregate(limit=-1)
class Notification:
    order_id: Identifier()
    user_id: Identifier()
    message: Text(required=True)
    is_read: Boolean(default=False)
    notification_type: String(choices=NotificationType, default=NotificationType.NEW_ORDER.value)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def record(cls, message, order_id=None, user_id=None, notification_type=None):
        now = datetime.now(UTC)
        notification = cls(
            order_id=order_id,
            user_id=user_id,
            message=message,
            is_read=False,
            notification_type=notification_type or NotificationType.NEW_ORDER.value,
            created_at=now,
            updated_at=now,
        )
        notification.raise_(
            NotificationRecorded(
                notification_id=notification.id,
                order_id=order_id,
                notification_type=notification.notification_type,
                message=message,
                recorded_at=now,
            )
        )
        return notification

    def mark_read(self):
        self.is_read = True
        self.updated_at = datetime.now(UTC)
