"""Shared helpers for inbound event processors.

Provides the common pattern: check the recipient's setting → suppress
duplicates → render template → persist Notification → push to live
connections. Persisting always happens before the push, so anything a
client sees live is also in its history.
"""

import structlog
from notifications.channel.registry import ConnectionRegistry
from notifications.notification.notification import Notification
from notifications.preference.setting import NotificationSetting
from notifications.templates import get_template
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)


def wants(user_id, notification_type: str) -> bool:
    """Whether the user has this notification type switched on."""
    return current_domain.repository_for(NotificationSetting).is_enabled(str(user_id), notification_type)


def notify_user(
    user_id,
    notification_type: str,
    context: dict,
    registry: ConnectionRegistry,
    created_at=None,
    source_event_type: str | None = None,
    source_event_id: str | None = None,
) -> Notification | None:
    """Create and push a notification if the user wants this type.

    Returns:
        The stored notification, or None when the user opted out or the
        source event was already processed for this user.
    """
    user_id = str(user_id)

    if not wants(user_id, notification_type):
        logger.info(
            "User has notification type disabled",
            user_id=user_id,
            notification_type=notification_type,
        )
        return None

    repo = current_domain.repository_for(Notification)
    if repo.find_by_source(user_id, source_event_id) is not None:
        logger.info(
            "Duplicate event skipped",
            user_id=user_id,
            notification_type=notification_type,
            source_event_id=source_event_id,
        )
        return None

    message = get_template(notification_type).render(context)
    notification = Notification.create(
        user_id=user_id,
        notification_type=notification_type,
        message=message,
        created_at=created_at,
        source_event_type=source_event_type,
        source_event_id=source_event_id,
    )
    repo.add(notification)

    delivered = registry.deliver(user_id, notification.to_payload())

    logger.info(
        "Notification created",
        user_id=user_id,
        notification_type=notification_type,
        notification_id=str(notification.id),
        connections=delivered,
    )
    return notification
