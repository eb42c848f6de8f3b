"""Reservation cancelled template — sent to the host of the accommodation."""

from notifications.notification.notification import NotificationType
from notifications.templates.formatting import accommodation_label, day, person_name


class ReservationCancelledTemplate:
    notification_type = NotificationType.RESERVATION_CANCELED.value

    @staticmethod
    def render(context: dict) -> str:
        guest = person_name(context.get("guest_name"), context.get("guest_last_name")) or "a guest"
        email = context.get("guest_email")
        contact = f" ({email})" if email else ""
        label = accommodation_label(context.get("accommodation_name"))
        return (
            f"Reservation for {label} "
            f"from {day(context.get('start_date'))} to {day(context.get('end_date'))} "
            f"has been cancelled by guest {guest}{contact}."
        )
