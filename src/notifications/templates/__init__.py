"""Template registry — maps NotificationType to template classes.

Each template renders the final message text from event fields plus the
enrichment result. Rendering is pure string composition.
"""

from notifications.notification.notification import NotificationType
from notifications.templates.accommodation_rated import AccommodationRatedTemplate
from notifications.templates.host_rated import HostRatedTemplate
from notifications.templates.reservation_cancelled import ReservationCancelledTemplate
from notifications.templates.reservation_created import ReservationCreatedTemplate
from notifications.templates.reservation_responded import ReservationRespondedTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.RESERVATION_CREATED.value: ReservationCreatedTemplate,
    NotificationType.RESERVATION_CANCELED.value: ReservationCancelledTemplate,
    NotificationType.RESERVATION_RESPONDED.value: ReservationRespondedTemplate,
    NotificationType.ACCOMMODATION_RATED.value: AccommodationRatedTemplate,
    NotificationType.HOST_RATED.value: HostRatedTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
