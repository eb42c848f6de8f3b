"""Application tests for the topic router — decoding and error containment."""

import json
from unittest.mock import patch

import pytest
from notifications.inbound.router import DispatchOutcome, EventDecodeError
from notifications.inbound.schemas import HostReviewedEvent
from notifications.notification.notification import NotificationType


def _reservation_body(accommodation_id, **overrides):
    body = {
        "reservationId": "11111111-1111-4111-8111-111111111111",
        "accommodationId": accommodation_id,
        "guestName": "Jane",
        "guestLastName": "Doe",
        "startDate": "2024-06-01",
        "endDate": "2024-06-05",
    }
    body.update(overrides)
    return json.dumps(body)


class TestTopics:
    def test_all_inbound_topics_are_routed(self, event_router):
        assert set(event_router.topics) == {
            "reservation-created",
            "reservation-cancelled",
            "request-responded",
            "accommodation-reviewed",
            "host-reviewed",
        }

    def test_unknown_topic_is_dropped(self, event_router):
        assert event_router.dispatch("payment-received", "{}") is DispatchOutcome.DROPPED


class TestDecode:
    def test_decode_json_text(self, event_router, host_id):
        event = event_router.decode("host-reviewed", json.dumps({"hostId": host_id, "rating": 5}))
        assert isinstance(event, HostReviewedEvent)

    def test_decode_bytes(self, event_router, host_id):
        event = event_router.decode("host-reviewed", json.dumps({"hostId": host_id, "rating": 5}).encode())
        assert event.rating == 5

    def test_decode_dict(self, event_router, host_id):
        assert event_router.decode("host-reviewed", {"hostId": host_id, "rating": "4"}).rating == 4

    def test_decode_failure(self, event_router):
        with pytest.raises(EventDecodeError) as exc:
            event_router.decode("host-reviewed", "{not json")
        assert exc.value.topic == "host-reviewed"


class TestDispatch:
    def test_processed_event_notifies(self, event_router, provision, stored, host_id, accommodation_id, host_connection):
        provision(host_id, NotificationType.RESERVATION_CREATED.value)

        outcome = event_router.dispatch("reservation-created", _reservation_body(accommodation_id))

        assert outcome is DispatchOutcome.PROCESSED
        assert len(stored(host_id)) == 1
        assert len(host_connection.payloads) == 1

    def test_opted_out_event_is_still_processed(self, event_router, provision, stored, host_id, accommodation_id):
        provision(host_id, NotificationType.RESERVATION_CREATED.value, enabled=False)

        outcome = event_router.dispatch("reservation-created", _reservation_body(accommodation_id))

        assert outcome is DispatchOutcome.PROCESSED
        assert stored(host_id) == []

    def test_malformed_body_is_dropped(self, event_router, stored, host_id):
        assert event_router.dispatch("reservation-created", "{not json") is DispatchOutcome.DROPPED
        assert stored(host_id) == []

    def test_invalid_fields_are_dropped(self, event_router, accommodation_id):
        body = _reservation_body(accommodation_id, startDate="yesterday")
        assert event_router.dispatch("reservation-created", body) is DispatchOutcome.DROPPED

    def test_enrichment_timeout_is_dropped(
        self, event_router, accommodations, provision, stored, host_id, accommodation_id, host_connection
    ):
        provision(host_id, NotificationType.RESERVATION_CREATED.value)
        accommodations.configure(should_succeed=False, failure_reason="timed out")

        outcome = event_router.dispatch("reservation-created", _reservation_body(accommodation_id))

        assert outcome is DispatchOutcome.DROPPED
        assert stored(host_id) == []
        assert host_connection.sent_frames == []

    def test_unexpected_error_is_contained(self, event_router, provision, host_id, accommodation_id):
        provision(host_id, NotificationType.RESERVATION_CREATED.value)

        with patch(
            "notifications.notification.reservation_events.notify_user",
            side_effect=RuntimeError("database on fire"),
        ):
            outcome = event_router.dispatch("reservation-created", _reservation_body(accommodation_id))

        assert outcome is DispatchOutcome.DROPPED

    def test_failure_does_not_affect_next_event(
        self, event_router, accommodations, provision, stored, host_id, accommodation_id
    ):
        provision(host_id, NotificationType.RESERVATION_CREATED.value, NotificationType.HOST_RATED.value)
        accommodations.configure(should_succeed=False)

        first = event_router.dispatch("reservation-created", _reservation_body(accommodation_id))
        second = event_router.dispatch("host-reviewed", json.dumps({"hostId": host_id, "rating": 5}))

        assert first is DispatchOutcome.DROPPED
        assert second is DispatchOutcome.PROCESSED
        assert len(stored(host_id)) == 1


def _dropped(entries):
    return [e for e in entries if e["event"] == "Event dropped"]


class TestDropLogging:
    def test_unknown_topic(self, event_router, log_output):
        event_router.dispatch("payment-received", "{}")

        [entry] = _dropped(log_output)
        assert entry["log_level"] == "error"
        assert entry["topic"] == "payment-received"
        assert entry["reason"] == "unknown topic"

    def test_decode_failure(self, event_router, log_output):
        event_router.dispatch("reservation-created", "{not json")

        [entry] = _dropped(log_output)
        assert entry["log_level"] == "error"
        assert entry["topic"] == "reservation-created"
        assert entry["reason"] == "decode failure"

    def test_enrichment_failure(self, event_router, accommodations, provision, host_id, accommodation_id, log_output):
        provision(host_id, NotificationType.RESERVATION_CREATED.value)
        accommodations.configure(should_succeed=False, failure_reason="timed out")

        event_router.dispatch("reservation-created", _reservation_body(accommodation_id))

        [entry] = _dropped(log_output)
        assert entry["log_level"] == "error"
        assert entry["reason"] == "enrichment failure"
        assert entry["accommodation_id"] == accommodation_id
        assert entry["error"] == "timed out"

    def test_unexpected_error(self, event_router, provision, host_id, accommodation_id, log_output):
        provision(host_id, NotificationType.RESERVATION_CREATED.value)

        with patch(
            "notifications.notification.reservation_events.notify_user",
            side_effect=RuntimeError("database on fire"),
        ):
            event_router.dispatch("reservation-created", _reservation_body(accommodation_id))

        [entry] = _dropped(log_output)
        assert entry["log_level"] == "error"
        assert entry["reason"] == "unexpected error"
        assert entry["error"] == "database on fire"
        assert entry["exc_info"] is True

    def test_processed_event_logs_no_drop(self, event_router, provision, host_id, accommodation_id, log_output):
        provision(host_id, NotificationType.RESERVATION_CREATED.value)

        event_router.dispatch("reservation-created", _reservation_body(accommodation_id))

        assert _dropped(log_output) == []
