"""Push channel handshake — two-gate bearer authentication.

State Machine (4 states):
    UNAUTHENTICATED → HANDSHAKING → AUTHENTICATED
    UNAUTHENTICATED → REJECTED
    HANDSHAKING → REJECTED

Gate one runs on the upgrade request: a credential must be present, but it
is only stashed, not validated. Gate two runs on the first CONNECT frame:
the credential (frame header first, stashed one otherwise) is verified and
the resulting identity becomes the session's identity. Only an
AUTHENTICATED session may be registered for delivery.
"""

from enum import Enum

import structlog

from notifications.auth.tokens import TokenError, TokenVerifier, VerifiedIdentity

logger = structlog.get_logger(__name__)

BEARER_SCHEME = "bearer"


class SessionState(Enum):
    UNAUTHENTICATED = "Unauthenticated"
    HANDSHAKING = "Handshaking"
    AUTHENTICATED = "Authenticated"
    REJECTED = "Rejected"


_VALID_TRANSITIONS = {
    SessionState.UNAUTHENTICATED: {
        SessionState.HANDSHAKING,
        SessionState.REJECTED,
    },
    SessionState.HANDSHAKING: {
        SessionState.AUTHENTICATED,
        SessionState.REJECTED,
    },
    SessionState.AUTHENTICATED: set(),  # Terminal
    SessionState.REJECTED: set(),  # Terminal
}


class HandshakeRejected(Exception):
    """The session failed authentication and must be aborted."""


def extract_bearer(value: str | None) -> str | None:
    """Token from a raw or `Bearer`-prefixed value; None when blank.

    The scheme is matched case-insensitively, and a scheme with nothing
    after it carries no credential.
    """
    if value is None:
        return None
    scheme, _, rest = value.strip().partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        return rest.strip() or None
    return value.strip() or None


class ChannelSession:
    """Authentication state of one push connection."""

    def __init__(self, verifier: TokenVerifier):
        self._verifier = verifier
        self.state = SessionState.UNAUTHENTICATED
        self.token: str | None = None
        self.identity: VerifiedIdentity | None = None

    @property
    def authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    def _transition(self, target: SessionState) -> None:
        if target not in _VALID_TRANSITIONS[self.state]:
            raise HandshakeRejected(f"Cannot transition from {self.state.value} to {target.value}")
        self.state = target

    def reject(self, reason: str) -> HandshakeRejected:
        """Move to REJECTED (unless already terminal) and build the error to raise."""
        if SessionState.REJECTED in _VALID_TRANSITIONS[self.state]:
            self._transition(SessionState.REJECTED)
        logger.warning("Push session rejected", reason=reason)
        return HandshakeRejected(reason)

    def begin(self, query_token: str | None = None, authorization: str | None = None) -> None:
        """Gate one: find a credential on the upgrade request and stash it."""
        token = extract_bearer(query_token) or extract_bearer(authorization)
        if token is None:
            raise self.reject("No bearer credential on upgrade request")

        self.token = token
        self._transition(SessionState.HANDSHAKING)

    def connect(self, frame_authorization: str | None = None) -> VerifiedIdentity:
        """Gate two: verify the credential presented with the CONNECT frame."""
        if self.state is not SessionState.HANDSHAKING:
            raise self.reject(f"CONNECT not allowed in state {self.state.value}")

        token = extract_bearer(frame_authorization) or self.token
        if token is None:
            raise self.reject("No bearer credential for CONNECT")

        try:
            identity = self._verifier.verify(token)
        except TokenError as e:
            raise self.reject(f"Invalid bearer credential for CONNECT: {e}") from e

        self.identity = identity
        self._transition(SessionState.AUTHENTICATED)
        return identity
