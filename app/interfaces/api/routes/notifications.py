"""Endpoints and websocket handler for in-app notifications."""

from __future__ import annotations

import logging

from anyio import to_thread
from fastapi import APIRouter, Depends, Query, Response, WebSocket, WebSocketDisconnect, status

from app.application.use_cases.notifications import (
    NotificationStore,
    ReminderOptions,
    create_upcoming_appointment_notifications,
    notify_checkup_saved,
    notify_order_cancelled,
    notify_order_placed,
)
from app.domain.entities import (
    NOTIFICATION_AUDIENCES,
    NOTIFICATION_PROVIDER_TYPES,
    AppNotification,
)
from app.infrastructure.notifications import notification_manager, serialize_notification
from app.interfaces.api.dependencies import get_notification_store
from app.interfaces.api.schemas import (
    CheckupSavedEvent,
    NotificationCreate,
    NotificationCreateResponse,
    NotificationMarkReadRequest,
    NotificationRead,
    OrderPlacedEvent,
    PermissionRead,
    ReminderRequest,
    ReminderResult,
    UnreadCountRead,
)
from app.interfaces.api.schemas.notification import (
    NotificationAudienceField,
    ProviderTypeField,
)
from app.utils import format_relative_time

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(
    notification: AppNotification, store: NotificationStore
) -> NotificationRead:
    return NotificationRead(
        id=notification.id,
        title=notification.title,
        message=notification.message,
        created_at=notification.created_at,
        relative_time=format_relative_time(notification.created_at, now=store.now()),
        type=notification.type,
        audience=notification.audience,
        provider_type=notification.provider_type,
        read=notification.read,
        link=notification.link,
    )


def _creation_response(
    notification: AppNotification | None,
    response: Response,
    store: NotificationStore,
) -> NotificationCreateResponse:
    if notification is None:
        return NotificationCreateResponse(created=False, notification=None)
    response.status_code = status.HTTP_201_CREATED
    return NotificationCreateResponse(
        created=True, notification=_notification_to_schema(notification, store)
    )


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    audience: NotificationAudienceField | None = Query(default=None),
    provider_type: ProviderTypeField | None = Query(default=None),
    store: NotificationStore = Depends(get_notification_store),
) -> list[NotificationRead]:
    """Return the notifications visible for the audience, newest first."""

    notifications = store.get_notifications(audience, provider_type)
    return [_notification_to_schema(notification, store) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    audience: NotificationAudienceField | None = Query(default=None),
    provider_type: ProviderTypeField | None = Query(default=None),
    store: NotificationStore = Depends(get_notification_store),
) -> UnreadCountRead:
    return UnreadCountRead(unread=store.count_unread(audience, provider_type))


@router.post("/", response_model=NotificationCreateResponse)
def create_notification(
    payload: NotificationCreate,
    response: Response,
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationCreateResponse:
    """Store a notification; duplicated dedupe keys are reported as not created."""

    notification = store.add_notification(payload.to_input())
    return _creation_response(notification, response, store)


@router.post("/events/order-placed", response_model=NotificationCreateResponse)
def order_placed(
    payload: OrderPlacedEvent,
    response: Response,
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationCreateResponse:
    """Confirm a checkout to the pet owner; repeated orders are not notified twice."""

    notification = notify_order_placed(
        store, order_id=payload.order_id, total_amount=payload.total_amount
    )
    return _creation_response(notification, response, store)


@router.post("/events/order-cancelled", response_model=NotificationCreateResponse)
def order_cancelled(
    response: Response,
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationCreateResponse:
    return _creation_response(notify_order_cancelled(store), response, store)


@router.post("/events/checkup-saved", response_model=NotificationCreateResponse)
def checkup_saved(
    payload: CheckupSavedEvent,
    response: Response,
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationCreateResponse:
    notification = notify_checkup_saved(store, pet_name=payload.pet_name)
    return _creation_response(notification, response, store)


@router.post("/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_notifications_as_read(
    payload: NotificationMarkReadRequest,
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    for notification_id in payload.unique_ids():
        store.mark_as_read(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/read-all", status_code=status.HTTP_204_NO_CONTENT)
def mark_all_notifications_as_read(
    audience: NotificationAudienceField | None = Query(default=None),
    provider_type: ProviderTypeField | None = Query(default=None),
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    store.mark_all_as_read(audience, provider_type)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_notification_as_read(
    notification_id: str,
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    """Mark one notification as read; unknown identifiers are ignored."""

    store.mark_as_read(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def clear_notifications(
    audience: NotificationAudienceField | None = Query(default=None),
    provider_type: ProviderTypeField | None = Query(default=None),
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    store.clear(audience, provider_type)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/reminders", response_model=ReminderResult)
def generate_reminders(
    payload: ReminderRequest,
    store: NotificationStore = Depends(get_notification_store),
) -> ReminderResult:
    """Create upcoming appointment reminders for the submitted bookings."""

    options = ReminderOptions(
        audience=payload.audience,
        provider_type=payload.provider_type,
        statuses=tuple(payload.statuses),
        service_label=payload.service_label,
        link=payload.link,
    )
    created = create_upcoming_appointment_notifications(store, payload.bookings, options)
    if created:
        logger.info("Created %s appointment reminders for %s", created, payload.audience)
    return ReminderResult(created=created)


@router.get("/permission", response_model=PermissionRead)
def get_browser_permission(
    store: NotificationStore = Depends(get_notification_store),
) -> PermissionRead:
    return PermissionRead(permission=store.browser_permission)


@router.post("/permission", response_model=PermissionRead)
def request_browser_permission(
    store: NotificationStore = Depends(get_notification_store),
) -> PermissionRead:
    """Ask to enable browser alerts for booking and appointment reminders."""

    return PermissionRead(permission=store.request_browser_permission())


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notification updates and popups."""

    store: NotificationStore = websocket.app.state.notification_store
    audience = websocket.query_params.get("audience") or "all"
    provider_type = websocket.query_params.get("provider_type") or None
    if audience not in NOTIFICATION_AUDIENCES or (
        provider_type is not None and provider_type not in NOTIFICATION_PROVIDER_TYPES
    ):
        await websocket.close(code=1008)
        return

    await notification_manager.connect(audience, websocket)
    try:
        notifications = await to_thread.run_sync(
            store.get_notifications, audience, provider_type
        )
        await websocket.send_json(
            {
                "type": "init",
                "data": [serialize_notification(item) for item in notifications],
                "unread": sum(1 for item in notifications if not item.read),
            }
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list):
                    for notification_id in ids:
                        if isinstance(notification_id, str):
                            await to_thread.run_sync(store.mark_as_read, notification_id)
                continue
    except WebSocketDisconnect:
        notification_manager.disconnect(audience, websocket)
    except Exception:  # pragma: no cover - unexpected transport failure
        notification_manager.disconnect(audience, websocket)
        raise
