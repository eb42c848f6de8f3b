"""Inbound reservation events — Notifications reacts to the Reservation service.

reservation-created / reservation-cancelled go to the accommodation's host,
who is resolved through the accommodation service. request-responded goes to
the guest named on the event.
"""

import structlog
from notifications.channel.registry import ConnectionRegistry
from notifications.enrichment.accommodation_port import AccommodationPort
from notifications.inbound.schemas import RequestRespondedEvent, ReservationEvent
from notifications.notification.helpers import notify_user, wants
from notifications.notification.notification import NotificationType
from notifications.templates.reservation_responded import parse_status

logger = structlog.get_logger(__name__)


class ReservationEventsProcessor:
    """Turns reservation lifecycle events into host and guest notifications."""

    def __init__(self, accommodations: AccommodationPort, registry: ConnectionRegistry):
        self.accommodations = accommodations
        self.registry = registry

    def _notify_host(self, event: ReservationEvent, notification_type: str, source: str):
        host = self.accommodations.get_host(event.accommodation_id)
        return notify_user(
            user_id=host.host_id,
            notification_type=notification_type,
            context={
                "accommodation_name": host.accommodation_name,
                "start_date": event.start_date,
                "end_date": event.end_date,
                "guest_name": event.guest_name,
                "guest_last_name": event.guest_last_name,
                "guest_email": event.guest_email,
            },
            registry=self.registry,
            created_at=event.created_at,
            source_event_type=source,
            source_event_id=f"{source}:{event.reservation_id}" if event.reservation_id else None,
        )

    def on_reservation_created(self, event: ReservationEvent):
        """Tell the host a guest has requested their accommodation."""
        return self._notify_host(event, NotificationType.RESERVATION_CREATED.value, "reservation-created")

    def on_reservation_cancelled(self, event: ReservationEvent):
        """Tell the host a guest has cancelled a reservation."""
        return self._notify_host(event, NotificationType.RESERVATION_CANCELED.value, "reservation-cancelled")

    def on_request_responded(self, event: RequestRespondedEvent):
        """Tell the guest how their reservation request was answered."""
        notification_type = NotificationType.RESERVATION_RESPONDED.value

        # Guests who opted out cost no remote lookup
        if not wants(event.guest_id, notification_type):
            logger.info(
                "User has notification type disabled",
                user_id=str(event.guest_id),
                notification_type=notification_type,
            )
            return None

        host = self.accommodations.get_host(event.accommodation_id)

        status = parse_status(event.status)
        source_event_id = None
        if event.reservation_request_id:
            status_key = status.value if status else str(event.status).strip().upper()
            source_event_id = f"request-responded:{event.reservation_request_id}:{status_key}"

        return notify_user(
            user_id=event.guest_id,
            notification_type=notification_type,
            context={
                "accommodation_name": host.accommodation_name,
                "host_name": event.host_name,
                "host_last_name": event.host_last_name,
                "status": event.status,
                "responded_at": event.responded_at,
            },
            registry=self.registry,
            created_at=event.responded_at,
            source_event_type="request-responded",
            source_event_id=source_event_id,
        )
