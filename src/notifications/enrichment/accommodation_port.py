"""Accommodation lookup port — resolves the host behind an accommodation."""

from abc import ABC, abstractmethod
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AccommodationHost(BaseModel):
    """Owning host of an accommodation, as reported by the accommodation service."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    host_id: UUID = Field(alias="hostId")
    accommodation_name: str | None = Field(default=None, alias="accommodationName")


class EnrichmentError(Exception):
    """The accommodation service could not produce a trustworthy host."""

    def __init__(self, accommodation_id, reason: str):
        super().__init__(f"Could not resolve host for accommodation {accommodation_id}: {reason}")
        self.accommodation_id = str(accommodation_id)
        self.reason = reason


class AccommodationPort(ABC):
    """Abstract interface for accommodation lookups."""

    @abstractmethod
    def get_host(self, accommodation_id) -> AccommodationHost:
        """Return the accommodation's host.

        Raises:
            EnrichmentError: on any transport, status or payload problem.
        """
        ...
