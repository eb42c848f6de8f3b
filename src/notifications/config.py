"""Service settings using Pydantic Settings.

Domain and persistence configuration lives in `domain.toml`; everything the
service needs to talk to the outside world (accommodation service, identity
provider keys, the event bus) is read from `NOTIFICATIONS_*` environment
variables or an optional `.env` file.
"""

from functools import lru_cache
from typing import Annotated

from pydantic import BeforeValidator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def parse_list(v: str | list[str]) -> list[str]:
    """Parse a comma-separated string or pass a list through."""
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NOTIFICATIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
    )

    # =========================================================================
    # Accommodation service (enrichment)
    # =========================================================================
    accommodation_service_url: str = "http://localhost:8081"
    accommodation_timeout: float = 5.0

    # =========================================================================
    # Bearer tokens
    # =========================================================================
    # RSA public key (PEM) of the identity provider, or a shared secret for HS*
    jwt_key: str = ""
    jwt_algorithms: Annotated[list[str], NoDecode, BeforeValidator(parse_list)] = ["RS256"]
    jwt_audience: str | None = None
    jwt_issuer: str | None = None

    # =========================================================================
    # Event bus (Redis Streams)
    # =========================================================================
    redis_url: str = "redis://localhost:6379/0"
    consumer_enabled: bool = True
    consumer_group: str = "notification-service"
    consumer_name: str = "notification-service-1"
    consumer_workers: int = 4
    consumer_block_ms: int = 1000

    # =========================================================================
    # HTTP
    # =========================================================================
    cors_origins: Annotated[list[str], NoDecode, BeforeValidator(parse_list)] = ["*"]


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance; call `get_settings.cache_clear()` to reload."""
    return Settings()
