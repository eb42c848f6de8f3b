"""Notification store — ownership-scoped queries over Notification."""

from notifications.domain import notifications
from notifications.notification.notification import Notification
from protean.exceptions import ObjectNotFoundError

PAGE_SIZE = 100
NEWEST_FIRST = "-created_at"


@notifications.repository(part_of=Notification)
class NotificationRepository:
    """Queries used by the event pipeline and the history API.

    Every lookup takes the caller's user id. A notification owned by someone
    else is indistinguishable from one that does not exist.
    """

    def _every(self, **filters) -> list[Notification]:
        """All matching rows, newest first, read page by page."""
        query = self._dao.query.filter(**filters).order_by(NEWEST_FIRST)
        items: list[Notification] = []
        offset = 0
        while True:
            page = query.offset(offset).limit(PAGE_SIZE).all()
            items.extend(page.items)
            offset += PAGE_SIZE
            if not page.items or offset >= page.total:
                return items

    def for_user(self, user_id) -> list[Notification]:
        """All notifications for a user, newest first."""
        return self._every(user_id=str(user_id))

    def unread_for_user(self, user_id) -> list[Notification]:
        return self._every(user_id=str(user_id), read=False)

    def get_for_user(self, notification_id, user_id) -> Notification:
        try:
            notification = self.get(str(notification_id))
        except ObjectNotFoundError:
            notification = None

        if notification is None or str(notification.user_id) != str(user_id):
            raise ObjectNotFoundError(f"Notification {notification_id} not found")
        return notification

    def owned_by(self, notification_ids, user_id) -> list[Notification]:
        """The subset of `notification_ids` that belongs to `user_id`."""
        wanted = sorted({str(nid) for nid in notification_ids})
        if not wanted:
            return []
        return self._every(id__in=wanted, user_id=str(user_id))

    def find_by_source(self, user_id, source_event_id) -> Notification | None:
        """Notification already produced for this source event, if any."""
        if not source_event_id:
            return None
        items = (
            self._dao.query.filter(user_id=str(user_id), source_event_id=source_event_id)
            .all()
            .items
        )
        return items[0] if items else None
