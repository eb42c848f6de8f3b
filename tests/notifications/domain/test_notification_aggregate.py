"""Tests for the Notification aggregate — creation, read state, wire shape."""

from datetime import UTC, datetime

import pytest
from notifications.notification.events import NotificationCreated, NotificationRead
from notifications.notification.notification import Notification, NotificationType, topic_for
from protean.exceptions import ValidationError


def _notification(**overrides):
    defaults = {
        "user_id": "user-1",
        "notification_type": NotificationType.HOST_RATED.value,
        "message": "You were reviewed by Ana Smith with rating 5/5.",
    }
    defaults.update(overrides)
    return Notification.create(**defaults)


class TestNotificationCreation:
    def test_create_is_unread(self):
        n = _notification()
        assert n.read is False
        assert n.read_at is None

    def test_create_sets_created_at(self):
        n = _notification()
        assert n.created_at is not None

    def test_create_uses_given_timestamp(self):
        at = datetime(2024, 6, 1, 9, 30, tzinfo=UTC)
        n = _notification(created_at=at)
        assert n.created_at == at

    def test_naive_timestamp_is_treated_as_utc(self):
        n = _notification(created_at=datetime(2024, 6, 1, 9, 30))
        assert n.created_at.tzinfo is not None
        assert n.created_at.hour == 9

    def test_create_records_source_event(self):
        n = _notification(source_event_type="host-reviewed", source_event_id="host-reviewed:r-1")
        assert n.source_event_type == "host-reviewed"
        assert n.source_event_id == "host-reviewed:r-1"

    def test_create_raises_created_event(self):
        n = _notification()
        assert len(n._events) == 1
        event = n._events[0]
        assert isinstance(event, NotificationCreated)
        assert event.notification_id == str(n.id)
        assert event.user_id == "user-1"

    def test_create_without_recipient_fails(self):
        with pytest.raises(ValidationError):
            _notification(user_id="")

    def test_unknown_type_fails(self):
        with pytest.raises(ValidationError):
            _notification(notification_type="ORDER_SHIPPED")

    def test_message_is_required(self):
        with pytest.raises(ValidationError):
            _notification(message=None)


class TestMarkRead:
    def test_mark_read(self):
        n = _notification()
        n.mark_read()
        assert n.read is True
        assert n.read_at is not None

    def test_mark_read_raises_read_event(self):
        n = _notification()
        n._events.clear()
        n.mark_read()
        assert len(n._events) == 1
        assert isinstance(n._events[0], NotificationRead)

    def test_mark_read_twice_is_noop(self):
        n = _notification()
        first = datetime(2024, 6, 2, tzinfo=UTC)
        n.mark_read(read_at=first)
        n._events.clear()

        n.mark_read()

        assert n.read is True
        assert n.read_at == first
        assert n._events == []


class TestPayload:
    def test_payload_shape(self):
        at = datetime(2024, 6, 1, 9, 30, tzinfo=UTC)
        n = _notification(created_at=at)
        assert n.to_payload() == {
            "id": str(n.id),
            "notification_type": "HOST_RATED",
            "message": "You were reviewed by Ana Smith with rating 5/5.",
            "created_at": at.isoformat(),
            "read": False,
        }

    def test_payload_reflects_read_flag(self):
        n = _notification()
        n.mark_read()
        assert n.to_payload()["read"] is True


class TestTopic:
    def test_topic_is_per_user(self):
        assert topic_for("abc") == "/topic/notifications/abc"
        assert topic_for("abc") != topic_for("abd")
