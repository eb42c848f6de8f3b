"""Push connection port — abstract interface for one live client connection."""

from abc import ABC, abstractmethod


class ConnectionClosed(Exception):
    """The connection can no longer accept payloads."""


class PushConnection(ABC):
    """Abstract interface for a live push connection of a single client."""

    @property
    @abstractmethod
    def closed(self) -> bool:
        """True once the connection has gone away."""
        ...

    @abstractmethod
    def send(self, frame: dict) -> None:
        """Hand a frame to the connection without waiting for the client.

        Raises:
            ConnectionClosed: if the connection is already closed.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Stop accepting frames."""
        ...
