"""FastAPI routes for the admin notification log and its live WebSocket feed."""

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from protean.utils.globals import current_domain

from agrimarket.auth import CurrentUser, InvalidToken, admin_user, decode_token
from agrimarket.notifications.api.schemas import (
    ClearReadResponse,
    NotificationListResponse,
    NotificationOut,
    NotificationResponse,
)
from agrimarket.notifications.channel import WebSocketChannel
from agrimarket.notifications.management import ClearReadNotifications, MarkNotificationRead
from agrimarket.notifications.notification import Notification
from agrimarket.utils.api import pagination

router = APIRouter(prefix="/order/notifications", tags=["notifications"])

PAGE_SIZE = 10


@router.get("", response_model=NotificationListResponse)
async def list_notifications(page: int = 1, _: CurrentUser = Depends(admin_user)) -> NotificationListResponse:
    page = max(page, 1)
    results = current_domain.repository_for(Notification).newest_first(page=page, limit=PAGE_SIZE)
    return NotificationListResponse(
        notifications=[NotificationOut.model_validate(n.to_dict()) for n in results.items],
        pagination=pagination(results.total, page, PAGE_SIZE, "totalNotifications"),
    )


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(notification_id: str, _: CurrentUser = Depends(admin_user)) -> NotificationResponse:
    final_state = current_domain.process(MarkNotificationRead(notification_id=notification_id), asynchronous=False)
    return NotificationResponse(
        message="Notification marked as read",
        notification=NotificationOut.model_validate(final_state),
    )


@router.delete("/clear-read", response_model=ClearReadResponse)
async def clear_read_notifications(_: CurrentUser = Depends(admin_user)) -> ClearReadResponse:
    deleted = current_domain.process(ClearReadNotifications(), asynchronous=False)
    return ClearReadResponse(message=f"{deleted} read notification(s) cleared", deleted_count=deleted)


@router.websocket("/ws")
async def notifications_feed(websocket: WebSocket, token: str | None = None):
    """Live feed of admin events (``newOrder``) for signed-in administrators."""
    app = websocket.app
    channel = app.state.channel
    try:
        user = decode_token(token or "", app.state.settings)
    except InvalidToken:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    if not user.is_admin or not isinstance(channel, WebSocketChannel):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await channel.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        channel.disconnect(websocket)
