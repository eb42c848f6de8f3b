"""Preference store — per-(user, type) lookups over NotificationSetting."""

from notifications.domain import notifications
from notifications.preference.setting import NotificationSetting


@notifications.repository(part_of=NotificationSetting)
class NotificationSettingRepository:
    def settings_for(self, user_id) -> list[NotificationSetting]:
        items = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(items, key=lambda s: s.notification_type)

    def setting_for(self, user_id, notification_type) -> NotificationSetting | None:
        items = (
            self._dao.query.filter(user_id=str(user_id), notification_type=notification_type)
            .all()
            .items
        )
        return items[0] if items else None

    def is_enabled(self, user_id, notification_type) -> bool:
        """True only when an enabled row exists; a missing row means do not send."""
        items = (
            self._dao.query.filter(
                user_id=str(user_id),
                notification_type=notification_type,
                enabled=True,
            )
            .all()
            .items
        )
        return bool(items)
