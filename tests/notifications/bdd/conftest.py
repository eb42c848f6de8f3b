"""Shared BDD fixtures and step definitions for the Notifications domain."""

import pytest
from notifications.channel.fake_push import FakePushConnection
from notifications.inbound.router import DispatchOutcome
from pytest_bdd import given, parsers, then


@pytest.fixture()
def people(host_id, guest_id):
    """Feature-file aliases for the fixed test identities."""
    return {"host-1": host_id, "guest-1": guest_id}


@pytest.fixture(autouse=True)
def _capture(log_output):
    """Start capturing before the first step so Then steps can inspect the logs."""
    return log_output


@pytest.fixture()
def connections():
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('accommodation "{name}" is owned by host "{alias}"'),
    target_fixture="accommodation",
)
def owned_accommodation(name, alias, people, accommodations, accommodation_id):
    accommodations.add(accommodation_id, people[alias], name)
    return accommodation_id


@given(parsers.cfparse('host "{alias}" has a live connection'))
def live_connection(alias, people, registry, connections):
    connection = FakePushConnection()
    registry.register(people[alias], connection)
    connections[alias] = connection


@given(parsers.cfparse('user "{alias}" has "{notification_type}" notifications enabled'))
def enabled(alias, notification_type, people, provision):
    provision(people[alias], notification_type)


@given(parsers.cfparse('user "{alias}" has "{notification_type}" notifications disabled'))
def disabled(alias, notification_type, people, provision):
    provision(people[alias], notification_type, enabled=False)


@given("the accommodation service times out")
def accommodation_timeout(accommodations):
    accommodations.configure(should_succeed=False, failure_reason="timed out")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('user "{alias}" has exactly {count:d} notifications'))
@then(parsers.cfparse('user "{alias}" has exactly {count:d} notification'))
def notification_count(alias, count, people, stored):
    assert len(stored(people[alias])) == count


@then(parsers.cfparse('the latest notification for "{alias}" mentions "{text}"'))
def latest_mentions(alias, text, people, stored):
    notifications = stored(people[alias])
    assert notifications, f"no notifications for {alias}"
    assert text in notifications[0].message


@then(parsers.cfparse('host "{alias}" received exactly {count:d} pushes'))
@then(parsers.cfparse('host "{alias}" received exactly {count:d} push'))
def push_count(alias, count, connections):
    assert len(connections[alias].payloads) == count


@then("the event is dropped")
def event_dropped(outcome):
    assert outcome is DispatchOutcome.DROPPED


@then(parsers.cfparse('the drop is logged as "{reason}"'))
def drop_logged(reason, log_output):
    drops = [e for e in log_output if e["event"] == "Event dropped"]
    assert [e["reason"] for e in drops] == [reason]
    assert drops[0]["log_level"] == "error"
