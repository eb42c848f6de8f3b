"""Setting management commands + handler — provisioning and toggling."""

import structlog
from notifications.domain import notifications
from notifications.notification.notification import NotificationType
from notifications.preference.setting import NotificationSetting, default_types_for
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, List, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.command(part_of="NotificationSetting")
class InitializeNotificationSettings:
    """Provision default settings for a newly recognized user."""

    user_id: Identifier(required=True)
    roles: List(content_type=String, required=True)


@notifications.command(part_of="NotificationSetting")
class UpdateNotificationSetting:
    """Turn delivery of one notification type on or off for a user."""

    user_id: Identifier(required=True)
    notification_type: String(choices=NotificationType, required=True)
    enabled: Boolean(required=True)


@notifications.command_handler(part_of=NotificationSetting)
class ManageSettingsHandler:
    @handle(InitializeNotificationSettings)
    def initialize(self, command: InitializeNotificationSettings):
        repo = current_domain.repository_for(NotificationSetting)

        # Idempotent: provisioning never touches a user who already has rows
        if repo.settings_for(command.user_id):
            logger.info(
                "Notification settings already exist",
                user_id=str(command.user_id),
            )
            return 0

        types = default_types_for(command.roles)
        for notification_type in types:
            repo.add(NotificationSetting.create(user_id=command.user_id, notification_type=notification_type.value))

        logger.info(
            "Notification settings initialized",
            user_id=str(command.user_id),
            roles=list(command.roles),
            count=len(types),
        )
        return len(types)

    @handle(UpdateNotificationSetting)
    def update(self, command: UpdateNotificationSetting):
        repo = current_domain.repository_for(NotificationSetting)
        setting = repo.setting_for(command.user_id, command.notification_type)
        if setting is None:
            raise ObjectNotFoundError(f"Notification setting {command.notification_type} not found")

        setting.toggle(command.enabled)
        repo.add(setting)
        return setting
