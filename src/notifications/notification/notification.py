"""Notification aggregate — one rendered fact delivered to one user.

Notifications are created reactively from inbound reservation and review
events, after the recipient's delivery settings have been consulted. The
rendered message, type and creation time never change; the only mutable
field is the read flag, which moves from unread to read and never back.
"""

from datetime import UTC, datetime
from enum import Enum

from notifications.domain import notifications
from notifications.notification.events import NotificationCreated, NotificationRead
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    RESERVATION_CREATED = "RESERVATION_CREATED"
    RESERVATION_CANCELED = "RESERVATION_CANCELED"
    RESERVATION_RESPONDED = "RESERVATION_RESPONDED"
    ACCOMMODATION_RATED = "ACCOMMODATION_RATED"
    HOST_RATED = "HOST_RATED"


def topic_for(user_id) -> str:
    """Push destination for a recipient."""
    return f"/topic/notifications/{user_id}"


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@notifications.aggregate
class Notification:
    """A notification addressed to a single user.

    `user_id` is the sole ownership key: every read, mark-as-read and delete
    is scoped to it.
    """

    # Recipient
    user_id: Identifier(required=True)

    # Content
    notification_type: String(choices=NotificationType, required=True)
    message: Text(required=True)

    # Source event correlation (best-effort duplicate suppression)
    source_event_type: String(max_length=100)
    source_event_id: String(max_length=200)

    # State
    read: Boolean(default=False)
    read_at: DateTime()

    # Timestamps
    created_at: DateTime(required=True)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        user_id,
        notification_type,
        message,
        created_at=None,
        source_event_type=None,
        source_event_id=None,
    ):
        """Create a new unread notification."""
        if not user_id:
            raise ValidationError({"user_id": ["A notification needs a recipient"]})

        created_at = created_at or datetime.now(UTC)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)

        notification = cls(
            user_id=str(user_id),
            notification_type=notification_type,
            message=message,
            source_event_type=source_event_type,
            source_event_id=source_event_id,
            read=False,
            created_at=created_at,
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                user_id=str(user_id),
                notification_type=notification_type,
                source_event_type=source_event_type,
                created_at=created_at,
            )
        )

        return notification

    # -------------------------------------------------------------------
    # Read state
    # -------------------------------------------------------------------
    def mark_read(self, read_at=None):
        """Mark the notification as read. Marking twice is a no-op."""
        if self.read:
            return

        now = read_at or datetime.now(UTC)
        self.read = True
        self.read_at = now

        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                read_at=now,
            )
        )

    def to_payload(self) -> dict:
        """Wire representation shared by history reads and live pushes."""
        created_at = self.created_at
        return {
            "id": str(self.id),
            "notification_type": self.notification_type,
            "message": self.message,
            "created_at": created_at.isoformat() if created_at else None,
            "read": bool(self.read),
        }
