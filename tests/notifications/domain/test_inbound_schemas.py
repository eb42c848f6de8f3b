"""Tests for the inbound event contracts."""

import json
from datetime import date
from uuid import UUID

import pytest
from notifications.inbound.schemas import (
    AccommodationReviewedEvent,
    HostReviewedEvent,
    RequestRespondedEvent,
    ReservationEvent,
)
from pydantic import ValidationError

ACCOMMODATION = "5a4b3c2d-1e0f-4a9b-8c7d-6e5f4a3b2c03"


class TestReservationEvent:
    def test_camel_case_body(self):
        event = ReservationEvent.model_validate_json(
            json.dumps(
                {
                    "reservationId": "11111111-1111-4111-8111-111111111111",
                    "accommodationId": ACCOMMODATION,
                    "guestName": "Jane",
                    "guestLastName": "Doe",
                    "guestEmail": "jane@example.com",
                    "startDate": "2024-06-01",
                    "endDate": "2024-06-05",
                    "createdAt": "2024-05-20T10:00:00",
                }
            )
        )
        assert event.accommodation_id == UUID(ACCOMMODATION)
        assert event.guest_name == "Jane"
        assert event.start_date == date(2024, 6, 1)
        assert event.created_at.year == 2024

    def test_snake_case_also_accepted(self):
        event = ReservationEvent(accommodation_id=ACCOMMODATION, start_date="2024-06-01", end_date="2024-06-05")
        assert event.reservation_id is None

    def test_unknown_fields_ignored(self):
        event = ReservationEvent.model_validate(
            {"accommodationId": ACCOMMODATION, "startDate": "2024-06-01", "endDate": "2024-06-05", "extra": 1}
        )
        assert not hasattr(event, "extra")

    def test_missing_accommodation_fails(self):
        with pytest.raises(ValidationError):
            ReservationEvent.model_validate({"startDate": "2024-06-01", "endDate": "2024-06-05"})

    def test_bad_accommodation_id_fails(self):
        with pytest.raises(ValidationError):
            ReservationEvent.model_validate(
                {"accommodationId": "not-a-uuid", "startDate": "2024-06-01", "endDate": "2024-06-05"}
            )


class TestRequestRespondedEvent:
    def test_status_defaults_to_pending(self):
        event = RequestRespondedEvent.model_validate(
            {
                "accommodationId": ACCOMMODATION,
                "guestId": "7c1d2e3f-4a5b-4c6d-8e9f-0a1b2c3d4e02",
                "respondedAt": "2024-05-20T14:00:00Z",
            }
        )
        assert event.status == "PENDING"
        assert event.host_name is None

    def test_guest_is_required(self):
        with pytest.raises(ValidationError):
            RequestRespondedEvent.model_validate(
                {"accommodationId": ACCOMMODATION, "respondedAt": "2024-05-20T14:00:00Z"}
            )


class TestReviewEvents:
    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, rating):
        with pytest.raises(ValidationError):
            AccommodationReviewedEvent.model_validate({"accommodationId": ACCOMMODATION, "rating": rating})

    def test_host_review(self):
        event = HostReviewedEvent.model_validate(
            {"hostId": "0b6f4a53-8f1e-4d57-9d0a-3f8b6a1c2d01", "rating": 5, "guestFirstName": "Ana"}
        )
        assert event.rating == 5
        assert event.guest_first_name == "Ana"
