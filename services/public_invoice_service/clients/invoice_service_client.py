"""Invoice service (document storage authority) HTTP client."""

from __future__ import annotations

from uuid import UUID

import httpx
from dispatch_service_libs.logging_utils import create_service_logger

from services.public_invoice_service.clients._utils import build_internal_headers
from services.public_invoice_service.config import PublicInvoiceSettings

logger = create_service_logger("public_invoice.invoice_service_client")


class InvoiceServiceClientImpl:
    """HTTP client for the invoice file endpoints of the invoice service."""

    def __init__(self, http_client: httpx.AsyncClient, config: PublicInvoiceSettings) -> None:
        self._client = http_client
        self._config = config

    async def open_pdf_stream(
        self,
        storage_key: str,
        correlation_id: UUID,
        *,
        byte_range: str | None = None,
    ) -> httpx.Response:
        """Send a streamed GET for the stored PDF and return the open response.

        The response body is not read. The caller must ``aclose()`` it.

        Raises:
            httpx.HTTPError: On transport errors
        """
        url = self._config.invoice_service_endpoint("stream-pdf")
        headers = build_internal_headers(self._config, correlation_id)
        if byte_range:
            headers["Range"] = byte_range

        logger.debug(
            "Opening PDF stream",
            extra={
                "storage_key": storage_key,
                "has_range": byte_range is not None,
                "correlation_id": str(correlation_id),
            },
        )

        request = self._client.build_request(
            "GET", url, params={"storage-key": storage_key}, headers=headers
        )
        return await self._client.send(request, stream=True)
