"""Mark-as-read commands + handler — single, bulk and all-for-user."""

import structlog
from notifications.domain import notifications
from notifications.notification.notification import Notification
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, List, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.command(part_of="Notification")
class MarkNotificationRead:
    """Mark one of the caller's notifications as read."""

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class MarkNotificationsRead:
    """Mark several notifications as read; ids the caller does not own are ignored."""

    notification_ids: List(content_type=String, required=True)
    user_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class MarkAllNotificationsRead:
    """Mark every unread notification of the caller as read."""

    user_id: Identifier(required=True)


@notifications.command_handler(part_of=Notification)
class ReadNotificationsHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead):
        repo = current_domain.repository_for(Notification)
        notification = repo.get_for_user(command.notification_id, command.user_id)
        notification.mark_read()
        repo.add(notification)

    @handle(MarkNotificationsRead)
    def mark_many_read(self, command: MarkNotificationsRead):
        repo = current_domain.repository_for(Notification)
        owned = repo.owned_by(command.notification_ids, command.user_id)
        if not owned:
            raise ObjectNotFoundError("No notifications found for user")

        for notification in owned:
            notification.mark_read()
            repo.add(notification)

        logger.info(
            "Notifications marked as read",
            user_id=str(command.user_id),
            requested=len(command.notification_ids),
            updated=len(owned),
        )
        return len(owned)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command: MarkAllNotificationsRead):
        repo = current_domain.repository_for(Notification)
        unread = repo.unread_for_user(command.user_id)
        for notification in unread:
            notification.mark_read()
            repo.add(notification)
        return len(unread)
