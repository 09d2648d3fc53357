"""Notification log queries."""

from agrimarket.domain import agrimarket
from agrimarket.notifications.notification import Notification


@agrimarket.repository(part_of=Notification)
class NotificationRepository:
    def newest_first(self, page=1, limit=10):
        return self.query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()

    def read(self) -> list[Notification]:
        return self.query.filter(is_read=True).limit(None).all().items
