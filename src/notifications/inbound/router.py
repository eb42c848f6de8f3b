"""Topic router — decodes inbound messages and hands them to processors.

This is the single containment boundary for event processing: a malformed
body, an unreachable accommodation service or any unexpected failure drops
that one event with an error log and the router carries on with the next.
"""

from enum import Enum

import structlog
from notifications.channel.registry import ConnectionRegistry
from notifications.enrichment.accommodation_port import AccommodationPort, EnrichmentError
from notifications.inbound.schemas import (
    AccommodationReviewedEvent,
    HostReviewedEvent,
    RequestRespondedEvent,
    ReservationEvent,
)
from notifications.notification.reservation_events import ReservationEventsProcessor
from notifications.notification.review_events import ReviewEventsProcessor
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

logger = structlog.get_logger(__name__)


class DispatchOutcome(Enum):
    PROCESSED = "PROCESSED"
    DROPPED = "DROPPED"


class EventDecodeError(Exception):
    """An inbound body did not match its topic's contract."""

    def __init__(self, topic: str, reason: str):
        super().__init__(f"Could not decode {topic} event: {reason}")
        self.topic = topic
        self.reason = reason


class TopicRouter:
    """Maps each inbound topic to its contract and processor method."""

    def __init__(self, reservations: ReservationEventsProcessor, reviews: ReviewEventsProcessor):
        self._routes = {
            "reservation-created": (ReservationEvent, reservations.on_reservation_created),
            "reservation-cancelled": (ReservationEvent, reservations.on_reservation_cancelled),
            "request-responded": (RequestRespondedEvent, reservations.on_request_responded),
            "accommodation-reviewed": (AccommodationReviewedEvent, reviews.on_accommodation_reviewed),
            "host-reviewed": (HostReviewedEvent, reviews.on_host_reviewed),
        }

    @classmethod
    def build(cls, accommodations: AccommodationPort, registry: ConnectionRegistry) -> "TopicRouter":
        return cls(
            ReservationEventsProcessor(accommodations, registry),
            ReviewEventsProcessor(accommodations, registry),
        )

    @property
    def topics(self) -> list[str]:
        return list(self._routes)

    def decode(self, topic: str, raw) -> BaseModel:
        """Parse a raw body (JSON text, bytes or an already-decoded dict)."""
        contract, _ = self._routes[topic]
        try:
            if isinstance(raw, dict):
                return contract.model_validate(raw)
            return contract.model_validate_json(raw)
        except PydanticValidationError as e:
            raise EventDecodeError(topic, f"{e.error_count()} invalid field(s)") from e

    def dispatch(self, topic: str, raw) -> DispatchOutcome:
        if topic not in self._routes:
            logger.error("Event dropped", topic=topic, reason="unknown topic")
            return DispatchOutcome.DROPPED

        _, processor = self._routes[topic]
        try:
            event = self.decode(topic, raw)
            processor(event)
        except EventDecodeError as e:
            logger.error("Event dropped", topic=topic, reason="decode failure", error=str(e))
            return DispatchOutcome.DROPPED
        except EnrichmentError as e:
            logger.error(
                "Event dropped",
                topic=topic,
                reason="enrichment failure",
                accommodation_id=e.accommodation_id,
                error=e.reason,
            )
            return DispatchOutcome.DROPPED
        except Exception as e:
            logger.error(
                "Event dropped",
                topic=topic,
                reason="unexpected error",
                error=str(e),
                exc_info=True,
            )
            return DispatchOutcome.DROPPED

        logger.debug("Event processed", topic=topic)
        return DispatchOutcome.PROCESSED
