"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - Settings are frozen: built once at startup, read-only afterwards
    - Missing or empty credentials fail at startup, never per request
    - get_settings() is cached (lru_cache), single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - SecretStr for shared secret and upstream credentials: repr() and model_dump()
      never expose them
    - Env names kept from the deployed service (SHARED_SECRET, TLO_USERNAME, ...)
"""

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from search_relay.core.domain_types import OutboundCredentials


class Settings(BaseSettings):
    """Relay settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, frozen=True,
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    person_search_path: str = "/tlo/person-search"

    # Inbound auth
    shared_secret: SecretStr

    # Upstream
    tlo_username: SecretStr
    tlo_password: SecretStr
    tlo_cert_path: str
    tlo_key_path: str
    tlo_url: str = "https://secureapi.tlo.com/TLOWebService.asmx"
    tlo_soap_action: str = "http://tlo.com/PersonSearch"
    tlo_timeout_seconds: float = Field(20.0, gt=0)
    tlo_retries: int = Field(2, ge=0)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("shared_secret", "tlo_username", "tlo_password")
    @classmethod
    def require_non_empty(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("must not be empty")
        return v

    @field_validator("person_search_path")
    @classmethod
    def normalize_route_path(cls, v: str) -> str:
        v = "/" + v.strip("/")
        if v == "/":
            raise ValueError("person search path cannot be the root path")
        return v

    def outbound_credentials(self) -> OutboundCredentials:
        return OutboundCredentials(
            username=self.tlo_username.get_secret_value(),
            password=self.tlo_password.get_secret_value(),
        )

    def redacted_values(self) -> tuple[str, ...]:
        """Secret strings that must never appear in log output."""
        return (
            self.shared_secret.get_secret_value(),
            self.tlo_username.get_secret_value(),
            self.tlo_password.get_secret_value(),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
