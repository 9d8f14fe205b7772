"""
account_opening.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Immutable, env-driven configuration shared by every request.

    Nothing else is shared between calls: all coordination happens in the database.
    """

    model_config = SettingsConfigDict(env_prefix="AOS_", case_sensitive=False, frozen=True)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "account-opening"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Credentials
    jwt_alg: str = "HS256"
    jwt_issuer: str = "account-opening"
    jwt_audience: str = "account-opening-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    token_ttl_hours: int = Field(default=24, ge=1)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Role bound at registration when the caller does not name one.
    default_role: str = "Advisor"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./account_opening.db"

    # Upload gate
    max_artifact_bytes: int = Field(default=5 * 1024 * 1024, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The signing key and expiry horizon are the only values the credential path reads;
# rotating `jwt_secret` invalidates every outstanding credential at once.
