"""FastAPI routes for the Notifications domain.

Thin adapters that translate HTTP requests into domain commands and
repository reads. The caller is always the verified token subject; no
route accepts a user id for someone else's data.
"""

from fastapi import APIRouter, Depends, Query
from notifications.api.schemas import (
    CountResponse,
    NotificationResponse,
    SettingResponse,
    StatusResponse,
)
from notifications.auth.dependencies import current_user
from notifications.auth.tokens import VerifiedIdentity
from notifications.notification.deletion import DeleteNotification, DeleteNotifications
from notifications.notification.notification import Notification
from notifications.notification.reading import (
    MarkAllNotificationsRead,
    MarkNotificationRead,
    MarkNotificationsRead,
)
from notifications.preference.management import (
    InitializeNotificationSettings,
    UpdateNotificationSetting,
)
from notifications.preference.setting import NotificationSetting
from protean.utils.globals import current_domain

router = APIRouter(prefix="/api/notifications", tags=["notifications"])
settings_router = APIRouter(prefix="/api/notification-settings", tags=["notification-settings"])


def _split_ids(ids: list[str]) -> list[str]:
    """Accept both `?ids=a&ids=b` and `?ids=a,b`."""
    return [part.strip() for value in ids for part in value.split(",") if part.strip()]


def _responses(items) -> list[NotificationResponse]:
    return [NotificationResponse(**n.to_payload()) for n in items]


# ---------------------------------------------------------------------------
# Notification history
# ---------------------------------------------------------------------------
@router.get("", response_model=list[NotificationResponse])
async def list_notifications(user: VerifiedIdentity = Depends(current_user)):
    """All of the caller's notifications, newest first."""
    repo = current_domain.repository_for(Notification)
    return _responses(repo.for_user(user.user_id))


@router.get("/unread", response_model=list[NotificationResponse])
async def list_unread(user: VerifiedIdentity = Depends(current_user)):
    repo = current_domain.repository_for(Notification)
    return _responses(repo.unread_for_user(user.user_id))


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(notification_id: str, user: VerifiedIdentity = Depends(current_user)):
    repo = current_domain.repository_for(Notification)
    return NotificationResponse(**repo.get_for_user(notification_id, user.user_id).to_payload())


@router.patch("/read-all", response_model=CountResponse)
async def mark_all_read(user: VerifiedIdentity = Depends(current_user)):
    count = current_domain.process(MarkAllNotificationsRead(user_id=user.user_id), asynchronous=False)
    return CountResponse(count=count or 0)


@router.patch("/read", response_model=CountResponse)
async def mark_many_read(
    ids: list[str] = Query(...),
    user: VerifiedIdentity = Depends(current_user),
):
    """Mark several notifications read; ids the caller does not own are skipped."""
    command = MarkNotificationsRead(notification_ids=_split_ids(ids), user_id=user.user_id)
    count = current_domain.process(command, asynchronous=False)
    return CountResponse(count=count or 0)


@router.patch("/{notification_id}/read", response_model=StatusResponse)
async def mark_read(notification_id: str, user: VerifiedIdentity = Depends(current_user)):
    command = MarkNotificationRead(notification_id=notification_id, user_id=user.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.delete("/{notification_id}", status_code=204)
async def delete_notification(notification_id: str, user: VerifiedIdentity = Depends(current_user)) -> None:
    command = DeleteNotification(notification_id=notification_id, user_id=user.user_id)
    current_domain.process(command, asynchronous=False)


@router.delete("", status_code=204)
async def delete_notifications(
    ids: list[str] = Query(...),
    user: VerifiedIdentity = Depends(current_user),
) -> None:
    command = DeleteNotifications(notification_ids=_split_ids(ids), user_id=user.user_id)
    current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------
@settings_router.get("", response_model=list[SettingResponse])
async def list_settings(user: VerifiedIdentity = Depends(current_user)):
    repo = current_domain.repository_for(NotificationSetting)
    return [SettingResponse.from_setting(s) for s in repo.settings_for(user.user_id)]


@settings_router.patch("/{notification_type}", response_model=SettingResponse)
async def update_setting(
    notification_type: str,
    enabled: bool = Query(...),
    user: VerifiedIdentity = Depends(current_user),
):
    command = UpdateNotificationSetting(
        user_id=user.user_id,
        notification_type=notification_type,
        enabled=enabled,
    )
    setting = current_domain.process(command, asynchronous=False)
    return SettingResponse.from_setting(setting)


@settings_router.post("/init", response_model=CountResponse)
async def initialize_settings(user_id: str = Query(...), role: str = Query(...)):
    """Provision default settings for a user. Called by the identity service."""
    roles = [r.strip() for r in role.split(",") if r.strip()]
    command = InitializeNotificationSettings(user_id=user_id, roles=roles)
    count = current_domain.process(command, asynchronous=False)
    return CountResponse(count=count or 0)
