"""Pydantic contracts for inbound events.

Upstream services publish JSON with camelCase keys; these models are the
anti-corruption layer between that wire shape and the processors. Unknown
keys are ignored so producers can add fields without breaking us.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InboundEvent(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class ReservationEvent(InboundEvent):
    """Shape shared by `reservation-created` and `reservation-cancelled`."""

    reservation_id: UUID | None = None
    accommodation_id: UUID
    guest_id: UUID | None = None
    guest_name: str | None = None
    guest_last_name: str | None = None
    guest_email: str | None = None
    start_date: date
    end_date: date
    created_at: datetime | None = None


class RequestRespondedEvent(InboundEvent):
    reservation_request_id: UUID | None = None
    accommodation_id: UUID
    guest_id: UUID
    host_name: str | None = None
    host_last_name: str | None = None
    responded_at: datetime
    status: str = "PENDING"


class AccommodationReviewedEvent(InboundEvent):
    review_id: UUID | None = None
    accommodation_id: UUID
    guest_id: UUID | None = None
    guest_first_name: str | None = None
    guest_last_name: str | None = None
    rating: int = Field(ge=1, le=5)
    comment: str | None = None
    created_at: datetime | None = None


class HostReviewedEvent(InboundEvent):
    review_id: UUID | None = None
    host_id: UUID
    guest_id: UUID | None = None
    guest_first_name: str | None = None
    guest_last_name: str | None = None
    rating: int = Field(ge=1, le=5)
    comment: str | None = None
    created_at: datetime | None = None
