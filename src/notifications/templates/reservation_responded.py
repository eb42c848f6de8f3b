"""Reservation responded template — sent to the guest who made the request.

The message depends on who answered and how. A response without any host
name was decided automatically; otherwise the status selects one of the
renderers in `STATUS_RENDERERS`, falling back to the pending message.
"""

from enum import Enum

from notifications.notification.notification import NotificationType
from notifications.templates.formatting import accommodation_label, day, person_name


class RequestStatus(Enum):
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    PENDING = "PENDING"


def parse_status(value) -> RequestStatus | None:
    try:
        return RequestStatus(str(value).strip().upper())
    except ValueError:
        return None


def _approved(host: str, label: str, on: str) -> str:
    return f"Good news! Host {host} has approved your reservation request for {label} on {on}."


def _rejected(host: str, label: str, on: str) -> str:
    return f"Unfortunately, host {host} has rejected your reservation request for {label} on {on}."


def _cancelled(host: str, label: str, on: str) -> str:
    return f"Your reservation request for {label} was cancelled by host {host} on {on}."


def _pending(host: str, label: str, on: str) -> str:
    return f"Your reservation request for {label} is still pending host review."


STATUS_RENDERERS = {
    RequestStatus.APPROVED: _approved,
    RequestStatus.REJECTED: _rejected,
    RequestStatus.CANCELLED: _cancelled,
    RequestStatus.PENDING: _pending,
}


class ReservationRespondedTemplate:
    notification_type = NotificationType.RESERVATION_RESPONDED.value

    @staticmethod
    def render(context: dict) -> str:
        label = accommodation_label(context.get("accommodation_name"))
        on = day(context.get("responded_at"))
        host = person_name(context.get("host_name"), context.get("host_last_name"))

        if not host:
            return f"Your reservation request for {label} was automatically approved by the system on {on}."

        renderer = STATUS_RENDERERS.get(parse_status(context.get("status")), _pending)
        return renderer(host, label, on)
