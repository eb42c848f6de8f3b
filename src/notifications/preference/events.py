"""Domain events for the NotificationSetting aggregate."""

from notifications.domain import notifications
from protean.fields import Boolean, DateTime, Identifier, String


@notifications.event(part_of="NotificationSetting")
class SettingCreated:
    """A delivery setting was provisioned for a user."""

    __version__ = 1

    setting_id: Identifier(required=True)
    user_id: Identifier(required=True)
    notification_type: String(required=True)
    enabled: Boolean(required=True)
    created_at: DateTime(required=True)


@notifications.event(part_of="NotificationSetting")
class SettingToggled:
    """A user switched a notification type on or off."""

    __version__ = 1

    setting_id: Identifier(required=True)
    user_id: Identifier(required=True)
    notification_type: String(required=True)
    enabled: Boolean(required=True)
    updated_at: DateTime(required=True)
