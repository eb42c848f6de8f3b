"""HTTP client for the accommodation service.

Resolves the owning host of an accommodation with a blocking call. The
client fails closed: anything short of a well-formed host id becomes an
`EnrichmentError`, so a caller can never mistake a garbage value for a
recipient.
"""

from __future__ import annotations

from typing import Final

import httpx
import structlog
from pydantic import ValidationError

from notifications.enrichment.accommodation_port import (
    AccommodationHost,
    AccommodationPort,
    EnrichmentError,
)

logger = structlog.get_logger(__name__)


class AccommodationClient(AccommodationPort):
    """Synchronous client for `GET /api/accommodations/{id}/host`."""

    HOST_ENDPOINT: Final[str] = "/api/accommodations/{accommodation_id}/host"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client:
            self._http.close()
        logger.info("AccommodationClient shutdown")

    def get_host(self, accommodation_id) -> AccommodationHost:
        path = self.HOST_ENDPOINT.format(accommodation_id=accommodation_id)

        try:
            response = self._http.get(path)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as exc:
            raise EnrichmentError(accommodation_id, "timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise EnrichmentError(accommodation_id, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise EnrichmentError(accommodation_id, f"transport error: {exc}") from exc
        except ValueError as exc:
            raise EnrichmentError(accommodation_id, "response is not JSON") from exc

        # Older deployments answer with the bare host id
        if isinstance(body, str):
            body = {"hostId": body}
        if not isinstance(body, dict):
            raise EnrichmentError(accommodation_id, "unexpected response shape")

        try:
            host = AccommodationHost.model_validate(body)
        except ValidationError as exc:
            raise EnrichmentError(accommodation_id, "response has no valid host id") from exc

        logger.debug(
            "Resolved accommodation host",
            accommodation_id=str(accommodation_id),
            host_id=str(host.host_id),
        )
        return host
