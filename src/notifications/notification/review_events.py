"""Inbound review events — Notifications reacts to the Review service.

Listens for accommodation-reviewed (host resolved via the accommodation
service) and host-reviewed (host id carried on the event).
"""

from notifications.channel.registry import ConnectionRegistry
from notifications.enrichment.accommodation_port import AccommodationPort
from notifications.inbound.schemas import AccommodationReviewedEvent, HostReviewedEvent
from notifications.notification.helpers import notify_user
from notifications.notification.notification import NotificationType


def _review_key(source: str, review_id) -> str | None:
    return f"{source}:{review_id}" if review_id else None


class ReviewEventsProcessor:
    """Reacts to review events to notify the reviewed host."""

    def __init__(self, accommodations: AccommodationPort, registry: ConnectionRegistry):
        self.accommodations = accommodations
        self.registry = registry

    def on_accommodation_reviewed(self, event: AccommodationReviewedEvent):
        """Notify the host that one of their accommodations was rated."""
        host = self.accommodations.get_host(event.accommodation_id)
        return notify_user(
            user_id=host.host_id,
            notification_type=NotificationType.ACCOMMODATION_RATED.value,
            context={
                "accommodation_name": host.accommodation_name,
                "guest_first_name": event.guest_first_name,
                "guest_last_name": event.guest_last_name,
                "rating": event.rating,
            },
            registry=self.registry,
            created_at=event.created_at,
            source_event_type="accommodation-reviewed",
            source_event_id=_review_key("accommodation-reviewed", event.review_id),
        )

    def on_host_reviewed(self, event: HostReviewedEvent):
        """Notify the host that they were rated."""
        return notify_user(
            user_id=event.host_id,
            notification_type=NotificationType.HOST_RATED.value,
            context={
                "guest_first_name": event.guest_first_name,
                "guest_last_name": event.guest_last_name,
                "rating": event.rating,
            },
            registry=self.registry,
            created_at=event.created_at,
            source_event_type="host-reviewed",
            source_event_id=_review_key("host-reviewed", event.review_id),
        )
