"""NotificationSetting aggregate — one per-user, per-type delivery switch.

A user receives notifications of a type only while a setting row for that
type exists and is enabled. Rows are provisioned once per user from their
roles (see `default_types_for`) and toggled individually afterwards.
"""

from datetime import UTC, datetime

from notifications.domain import notifications
from notifications.notification.notification import NotificationType
from notifications.preference.events import SettingCreated, SettingToggled
from protean.fields import Boolean, DateTime, Identifier, String

HOST_ROLE = "host"
GUEST_ROLE = "guest"

_ROLE_DEFAULTS = {
    HOST_ROLE: [t for t in NotificationType if t is not NotificationType.RESERVATION_RESPONDED],
    GUEST_ROLE: [NotificationType.RESERVATION_RESPONDED],
}


def default_types_for(roles) -> list[NotificationType]:
    """Notification types provisioned for a user holding `roles`.

    Hosts get everything about their accommodations, guests only get
    responses to their own requests. Unknown roles get nothing.
    """
    normalized = {str(role).strip().lower() for role in roles or []}
    types = []
    for role, role_types in _ROLE_DEFAULTS.items():
        if role in normalized:
            types.extend(t for t in role_types if t not in types)
    return types


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@notifications.aggregate
class NotificationSetting:
    """Whether `user_id` wants notifications of `notification_type`."""

    user_id: Identifier(required=True)
    notification_type: String(choices=NotificationType, required=True)
    enabled: Boolean(default=True)

    # Timestamps
    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, notification_type, enabled=True):
        now = datetime.now(UTC)

        setting = cls(
            user_id=str(user_id),
            notification_type=notification_type,
            enabled=enabled,
            created_at=now,
            updated_at=now,
        )

        setting.raise_(
            SettingCreated(
                setting_id=str(setting.id),
                user_id=str(user_id),
                notification_type=notification_type,
                enabled=enabled,
                created_at=now,
            )
        )

        return setting

    # -------------------------------------------------------------------
    # Toggle
    # -------------------------------------------------------------------
    def toggle(self, enabled: bool):
        """Switch delivery on or off. Setting the current value is a no-op."""
        if self.enabled == enabled:
            return

        now = datetime.now(UTC)
        self.enabled = enabled
        self.updated_at = now

        self.raise_(
            SettingToggled(
                setting_id=str(self.id),
                user_id=str(self.user_id),
                notification_type=self.notification_type,
                enabled=enabled,
                updated_at=now,
            )
        )
