"""Host rated template."""

from notifications.notification.notification import NotificationType
from notifications.templates.formatting import person_name


class HostRatedTemplate:
    notification_type = NotificationType.HOST_RATED.value

    @staticmethod
    def render(context: dict) -> str:
        reviewer = person_name(context.get("guest_first_name"), context.get("guest_last_name")) or "a guest"
        return f"You were reviewed by {reviewer} with rating {context.get('rating')}/5."
