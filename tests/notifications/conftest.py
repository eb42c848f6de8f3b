from datetime import UTC, datetime, timedelta

import pytest
import structlog
from jose import jwt
from notifications.auth.tokens import TokenVerifier
from notifications.channel.fake_push import FakePushConnection
from notifications.channel.registry import ConnectionRegistry
from notifications.enrichment.fake_accommodation import FakeAccommodationAdapter
from notifications.inbound.router import TopicRouter
from notifications.notification.notification import Notification
from notifications.preference.setting import NotificationSetting
from protean import current_domain
from protean.integrations.pytest import DomainFixture
from structlog.testing import capture_logs

TEST_SECRET = "notifications-test-secret"


@pytest.fixture(scope="session")
def notifications_bed():
    from notifications.domain import notifications

    bed = DomainFixture(notifications)
    # Module-level loggers must keep following the active configuration so
    # capture_logs sees them.
    structlog.configure(cache_logger_on_first_use=False)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(notifications_bed):
    with notifications_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Identities
# ---------------------------------------------------------------------------
@pytest.fixture()
def host_id():
    return "0b6f4a53-8f1e-4d57-9d0a-3f8b6a1c2d01"


@pytest.fixture()
def guest_id():
    return "7c1d2e3f-4a5b-4c6d-8e9f-0a1b2c3d4e02"


@pytest.fixture()
def accommodation_id():
    return "5a4b3c2d-1e0f-4a9b-8c7d-6e5f4a3b2c03"


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------
@pytest.fixture()
def registry():
    reg = ConnectionRegistry()
    yield reg
    reg.close()


@pytest.fixture()
def accommodations(accommodation_id, host_id):
    adapter = FakeAccommodationAdapter()
    adapter.add(accommodation_id, host_id, "Sea View Loft")
    return adapter


@pytest.fixture()
def event_router(accommodations, registry):
    return TopicRouter.build(accommodations, registry)


@pytest.fixture()
def host_connection(registry, host_id):
    connection = FakePushConnection()
    registry.register(host_id, connection)
    return connection


@pytest.fixture()
def guest_connection(registry, guest_id):
    connection = FakePushConnection()
    registry.register(guest_id, connection)
    return connection


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------
@pytest.fixture()
def token_secret():
    return TEST_SECRET


@pytest.fixture()
def token_verifier(token_secret):
    return TokenVerifier(key=token_secret, algorithms=["HS256"])


@pytest.fixture()
def make_token(host_id):
    """Factory for HS256 bearer tokens signed with the test secret."""

    def _make(sub=None, roles=("host",), expires_in=timedelta(minutes=5), secret=TEST_SECRET, **claims):
        payload = {"exp": datetime.now(UTC) + expires_in, **claims}
        if roles is not None:
            payload["roles"] = list(roles)
        subject = host_id if sub is None else sub
        if subject:
            payload["sub"] = subject
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------
@pytest.fixture()
def provision():
    """Create setting rows for a user: `provision(user_id, "HOST_RATED", enabled=False)`."""

    def _provision(user_id, *notification_types, enabled=True):
        repo = current_domain.repository_for(NotificationSetting)
        for notification_type in notification_types:
            repo.add(
                NotificationSetting.create(
                    user_id=user_id,
                    notification_type=notification_type,
                    enabled=enabled,
                )
            )

    return _provision


@pytest.fixture()
def stored():
    """All persisted notifications for a user, newest first."""

    def _stored(user_id):
        return current_domain.repository_for(Notification).for_user(user_id)

    return _stored


# ---------------------------------------------------------------------------
# Logs
# ---------------------------------------------------------------------------
@pytest.fixture()
def log_output():
    """Structured log entries emitted while the test runs."""
    with capture_logs() as entries:
        yield entries
