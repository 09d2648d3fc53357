"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, String, Text

from agrimarket.domain import agrimarket


@agrimarket.event(part_of="Notification")
class NotificationRecorded:
    """An administrator notification was added to the log."""

    __version__ = 1

    notification_id: Identifier(required=True)
    order_id: Identifier()
    notification_type: String(required=True)
    message: Text(required=True)
    recorded_at: DateTime(required=True)
