"""Delete commands + handler — remove the caller's own notifications."""

import structlog
from notifications.domain import notifications
from notifications.notification.notification import Notification
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, List, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.command(part_of="Notification")
class DeleteNotification:
    """Delete a single notification owned by the caller."""

    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class DeleteNotifications:
    """Delete several notifications; ids the caller does not own are ignored."""

    notification_ids: List(content_type=String, required=True)
    user_id: Identifier(required=True)


@notifications.command_handler(part_of=Notification)
class DeleteNotificationsHandler:
    @handle(DeleteNotification)
    def delete_notification(self, command: DeleteNotification):
        repo = current_domain.repository_for(Notification)
        notification = repo.get_for_user(command.notification_id, command.user_id)
        repo._dao.delete(notification)

    @handle(DeleteNotifications)
    def delete_notifications(self, command: DeleteNotifications):
        repo = current_domain.repository_for(Notification)
        owned = repo.owned_by(command.notification_ids, command.user_id)
        if not owned:
            raise ObjectNotFoundError("No notifications found for user")

        for notification in owned:
            repo._dao.delete(notification)

        logger.info(
            "Notifications deleted",
            user_id=str(command.user_id),
            requested=len(command.notification_ids),
            deleted=len(owned),
        )
        return len(owned)
