"""Notifications bounded context — per-user notification hub.

Consumes reservation and review events from other services, filters them
against each user's per-type delivery settings, persists the resulting
notifications, and pushes them to the user's live WebSocket connections.
"""

from protean.domain import Domain

from notifications.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
notifications = Domain(name="notifications")
