"""Accommodation rated template — sent to the host when a guest reviews a stay."""

from notifications.notification.notification import NotificationType
from notifications.templates.formatting import person_name


class AccommodationRatedTemplate:
    notification_type = NotificationType.ACCOMMODATION_RATED.value

    @staticmethod
    def render(context: dict) -> str:
        name = context.get("accommodation_name")
        subject = f'Your accommodation "{name.strip()}"' if name and name.strip() else "Your accommodation"
        reviewer = person_name(context.get("guest_first_name"), context.get("guest_last_name")) or "a guest"
        return f"{subject} was reviewed by {reviewer} with rating {context.get('rating')}/5."
