"""Pydantic response schemas for the admin notification log."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from agrimarket.utils.api import CamelModel, Envelope


class NotificationOut(CamelModel):
    id: str
    order_id: str | None = None
    user_id: str | None = None
    message: str
    is_read: bool
    type: str = Field(validation_alias="notification_type")
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NotificationListResponse(Envelope):
    notifications: list[NotificationOut]
    pagination: dict


class NotificationResponse(Envelope):
    notification: NotificationOut


class ClearReadResponse(Envelope):
    deleted_count: int
