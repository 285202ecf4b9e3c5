"""Protocol definitions for Public Invoice Service.

Defines interfaces for the upstream service clients used in dependency
injection. Portal components depend on these, not on the httpx clients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol
from uuid import UUID

import httpx

if TYPE_CHECKING:
    from services.public_invoice_service.dto.invoice_portal_v1 import (
        EnsurePdfResponseV1,
        ValidateTokenResponseV1,
    )


class DataServiceClientProtocol(Protocol):
    """Protocol for the data service (token and invoice authority) HTTP client.

    Every method raises ``httpx.HTTPError`` on transport failures and
    non-success statuses, and ``ValueError`` on malformed response bodies.
    """

    async def validate_token(self, token: str, correlation_id: UUID) -> ValidateTokenResponseV1:
        """Resolve a portal token to the invoice it authorizes."""
        ...

    async def ensure_pdf_current(self, token: str, correlation_id: UUID) -> EnsurePdfResponseV1:
        """Ask the authority to (re)generate the invoice PDF if it is stale."""
        ...

    async def mark_viewed(self, token: str, correlation_id: UUID) -> None:
        """Record that the invoice behind the token was viewed."""
        ...

    async def submit_signature(
        self, token: str, signature_path: str, correlation_id: UUID
    ) -> None:
        """Store the signature for the invoice behind the token."""
        ...


class InvoiceServiceClientProtocol(Protocol):
    """Protocol for the invoice service (document storage authority) HTTP client."""

    async def open_pdf_stream(
        self,
        storage_key: str,
        correlation_id: UUID,
        *,
        byte_range: str | None = None,
    ) -> httpx.Response:
        """Open a streamed response for the stored PDF.

        The caller owns the returned response and must ``aclose()`` it. The
        status code is not checked here.

        Args:
            storage_key: Storage key of the PDF
            correlation_id: Request correlation ID for tracing
            byte_range: Raw ``Range`` header to forward, if any
        """
        ...
