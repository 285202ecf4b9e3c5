"""Shared utilities for Public Invoice Service HTTP clients."""

from __future__ import annotations

from uuid import UUID

from services.public_invoice_service.config import PublicInvoiceSettings


def build_internal_headers(config: PublicInvoiceSettings, correlation_id: UUID) -> dict[str, str]:
    """Build headers for internal service calls.

    Args:
        config: Service settings (service identity and internal API key)
        correlation_id: Request correlation ID for distributed tracing

    Returns:
        Headers dict with service ID, correlation ID and, when configured,
        the internal API key
    """
    headers = {
        "X-Service-ID": config.SERVICE_NAME,
        "X-Correlation-ID": str(correlation_id),
    }
    api_key = config.get_internal_api_key()
    if api_key:
        headers["X-Internal-API-Key"] = api_key
    return headers
