"""Bearer token verification.

Tokens are issued by the identity provider; this service only verifies
them with the provider's public key (or a shared secret in development)
and reads the subject as the caller's user id.
"""

from __future__ import annotations

from typing import Any

import structlog
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from pydantic import BaseModel

logger = structlog.get_logger(__name__)


class VerifiedIdentity(BaseModel):
    """Identity proven by a valid bearer token."""

    user_id: str
    roles: list[str] = []


class TokenError(Exception):
    """Base exception for token-related errors."""


class TokenExpiredError(TokenError):
    """Raised when a token has expired."""


class TokenInvalidError(TokenError):
    """Raised when a token is invalid."""


def _roles_from(claims: dict[str, Any]) -> list[str]:
    roles = claims.get("roles")
    if roles is None:
        roles = (claims.get("realm_access") or {}).get("roles", [])
    if isinstance(roles, str):
        roles = [roles]
    return [str(r) for r in roles]


class TokenVerifier:
    def __init__(
        self,
        key: str,
        algorithms: list[str],
        audience: str | None = None,
        issuer: str | None = None,
    ) -> None:
        self._key = key
        self._algorithms = list(algorithms)
        self._audience = audience
        self._issuer = issuer

    @classmethod
    def from_settings(cls, settings) -> TokenVerifier:
        return cls(
            key=settings.jwt_key,
            algorithms=settings.jwt_algorithms,
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )

    def verify(self, token: str) -> VerifiedIdentity:
        """Validate signature, expiry and registered claims.

        Raises:
            TokenExpiredError: If the token has expired.
            TokenInvalidError: If the token is invalid or has no subject.
        """
        if not token or not self._key:
            raise TokenInvalidError("No token or verification key available")

        try:
            claims = jwt.decode(
                token,
                self._key,
                algorithms=self._algorithms,
                audience=self._audience,
                issuer=self._issuer,
                options={"verify_aud": self._audience is not None},
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JWTError as e:
            logger.debug("Token rejected", error=str(e))
            raise TokenInvalidError(f"Invalid token: {e}") from e

        subject = claims.get("sub")
        if not subject or not str(subject).strip():
            raise TokenInvalidError("Token has no subject")

        return VerifiedIdentity(user_id=str(subject), roles=_roles_from(claims))
