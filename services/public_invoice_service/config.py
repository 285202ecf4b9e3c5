"""
Configuration for Public Invoice Service.

Uses Pydantic settings for environment-based configuration. The service is a
public, unauthenticated edge: CORS is open by default and every upstream
call goes to internal Dispatch services.
"""

from __future__ import annotations

from dispatch_common.config_enums import Environment
from dispatch_service_libs.config import ServiceSettings
from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict


class PublicInvoiceSettings(ServiceSettings):
    """Configuration settings for Public Invoice Service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PUBLIC_INVOICE_SERVICE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Service identity
    SERVICE_NAME: str = "public-invoice-service"

    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        validation_alias="ENVIRONMENT",
        description="Runtime environment for the service",
    )

    # HTTP server configuration
    HOST: str = Field(default="0.0.0.0", description="HTTP server host")
    PORT: int = Field(default=4201, description="HTTP server port")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # CORS: the portal links are opened from e-mails and third-party sites
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")
    CORS_ALLOW_CREDENTIALS: bool = Field(
        default=False, description="Credentials are never needed for token links"
    )
    CORS_ALLOW_METHODS: list[str] = Field(default=["*"], description="Allowed HTTP methods")
    CORS_ALLOW_HEADERS: list[str] = Field(default=["*"], description="Allowed headers")

    # Upstream authorities
    DATA_SERVICE_URL: str = Field(
        default="http://dispatch_data_service:8000",
        description="Token/invoice authority base URL",
        validation_alias=AliasChoices(
            "PUBLIC_INVOICE_SERVICE_DATA_SERVICE_URL", "DATA_SERVICE_URL"
        ),
    )
    DATA_SERVICE_PORTAL_PATH: str = Field(
        default="/internal/invoice-portal",
        description="Path prefix of the invoice portal endpoints on the data service",
    )
    INVOICE_SERVICE_URL: str = Field(
        default="http://dispatch_invoice_service:8000",
        description="Document storage authority base URL",
        validation_alias=AliasChoices(
            "PUBLIC_INVOICE_SERVICE_INVOICE_SERVICE_URL", "INVOICE_SERVICE_URL"
        ),
    )
    INVOICE_SERVICE_FILES_PATH: str = Field(
        default="/api/invoicefiles",
        description="Path prefix of the invoice file endpoints on the invoice service",
    )

    # HTTP client configuration
    HTTP_CLIENT_TIMEOUT_SECONDS: float = Field(
        default=30.0, description="HTTP client request timeout in seconds"
    )
    HTTP_CLIENT_CONNECT_TIMEOUT_SECONDS: float = Field(
        default=10.0, description="HTTP client connection timeout in seconds"
    )

    # Public input constraints
    SIGNATURE_PATH_MAX_LENGTH: int = Field(
        default=5000, description="Maximum accepted signature_path length"
    )
    TOKEN_MAX_LENGTH: int = Field(
        default=1024, description="Tokens longer than this are rejected without a lookup"
    )
    STREAM_CHUNK_SIZE: int = Field(
        default=64 * 1024, description="Chunk size used when relaying document bytes"
    )

    # Rate limiting (per client IP)
    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Enable IP rate limiting")
    RATE_LIMIT_REQUESTS: int = Field(
        default=60, description="Rate limit: requests per minute per client IP"
    )
    RATE_LIMIT_STORAGE_URI: str | None = Field(
        default=None,
        description="Shared limiter storage (e.g. redis://...); in-memory when unset",
    )

    def data_service_endpoint(self, name: str) -> str:
        """Absolute URL of an invoice portal endpoint on the data service."""
        return f"{self.DATA_SERVICE_URL.rstrip('/')}{self.DATA_SERVICE_PORTAL_PATH}/{name}"

    def invoice_service_endpoint(self, name: str) -> str:
        """Absolute URL of an invoice file endpoint on the invoice service."""
        return f"{self.INVOICE_SERVICE_URL.rstrip('/')}{self.INVOICE_SERVICE_FILES_PATH}/{name}"


# Global settings instance
settings = PublicInvoiceSettings()
