"""Fake accommodation adapter — serves hosts from memory for testing."""

from notifications.enrichment.accommodation_port import (
    AccommodationHost,
    AccommodationPort,
    EnrichmentError,
)


class FakeAccommodationAdapter(AccommodationPort):
    """Accommodation lookup backed by a dict, with switchable failures."""

    def __init__(self):
        self.hosts: dict[str, AccommodationHost] = {}
        self.lookups: list[str] = []
        self.should_succeed = True
        self.failure_reason = "timed out"

    def add(self, accommodation_id, host_id, accommodation_name=None):
        self.hosts[str(accommodation_id)] = AccommodationHost(
            host_id=host_id,
            accommodation_name=accommodation_name,
        )

    def configure(self, should_succeed: bool = True, failure_reason: str = "timed out"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def get_host(self, accommodation_id) -> AccommodationHost:
        self.lookups.append(str(accommodation_id))
        if not self.should_succeed:
            raise EnrichmentError(accommodation_id, self.failure_reason)

        host = self.hosts.get(str(accommodation_id))
        if host is None:
            raise EnrichmentError(accommodation_id, "HTTP 404")
        return host

    def reset(self):
        self.hosts.clear()
        self.lookups.clear()
        self.should_succeed = True
        self.failure_reason = "timed out"
