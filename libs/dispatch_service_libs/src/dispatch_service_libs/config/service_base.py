"""Base settings shared by every Dispatch service."""

from __future__ import annotations

from dispatch_common.config_enums import Environment
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    """Environment awareness and service-to-service credentials.

    Services subclass this and set their own ``model_config`` env prefix.
    """

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        validation_alias="ENVIRONMENT",
        description="Runtime environment for the service",
    )

    INTERNAL_API_KEY: SecretStr | None = Field(
        default=None,
        description="Shared key sent to internal services as X-Internal-API-Key",
    )

    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    def is_testing(self) -> bool:
        return self.ENVIRONMENT == Environment.TESTING

    def get_internal_api_key(self) -> str | None:
        """Return the plain internal API key, or None when not configured."""
        if self.INTERNAL_API_KEY is None:
            return None
        return self.INTERNAL_API_KEY.get_secret_value()
