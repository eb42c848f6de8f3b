"""Reservation created template — sent to the host of the accommodation."""

from notifications.notification.notification import NotificationType
from notifications.templates.formatting import accommodation_label, day, person_name


class ReservationCreatedTemplate:
    notification_type = NotificationType.RESERVATION_CREATED.value

    @staticmethod
    def render(context: dict) -> str:
        guest = person_name(context.get("guest_name"), context.get("guest_last_name")) or "a guest"
        email = context.get("guest_email")
        contact = f" ({email})" if email else ""
        return (
            f"New reservation request for {accommodation_label(context.get('accommodation_name'))} "
            f"from {day(context.get('start_date'))} to {day(context.get('end_date'))} "
            f"created by guest {guest}{contact}."
        )
