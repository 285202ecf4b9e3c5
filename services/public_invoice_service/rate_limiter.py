"""Per-client-IP rate limiting for the public endpoints.

The public routes carry ``@limiter.limit(public_rate_limit)``. The limit is
read on every request so ``configure_limiter`` can apply an application's
settings to the shared limiter.
"""

from __future__ import annotations

from slowapi import Limiter
from starlette.requests import Request

from services.public_invoice_service.config import PublicInvoiceSettings, settings
from services.public_invoice_service.context import get_client_ip


def get_client_ip_key(request: Request) -> str:
    return get_client_ip(request)


_requests_per_minute = settings.RATE_LIMIT_REQUESTS


def public_rate_limit() -> str:
    return f"{_requests_per_minute}/minute"


# Shared storage when configured, in-memory otherwise
limiter = Limiter(
    key_func=get_client_ip_key,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI or "memory://",
    enabled=settings.RATE_LIMIT_ENABLED,
)


def configure_limiter(config: PublicInvoiceSettings) -> Limiter:
    """Apply ``config`` to the shared limiter and return it.

    In-memory counters are cleared so a new application starts with a full
    allowance.
    """
    global _requests_per_minute
    _requests_per_minute = config.RATE_LIMIT_REQUESTS
    limiter.enabled = config.RATE_LIMIT_ENABLED
    if not settings.RATE_LIMIT_STORAGE_URI:
        limiter.reset()
    return limiter
