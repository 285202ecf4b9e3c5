"""Data service (token and invoice authority) HTTP client."""

from __future__ import annotations

from uuid import UUID

import httpx
from dispatch_service_libs.logging_utils import create_service_logger

from services.public_invoice_service.clients._utils import build_internal_headers
from services.public_invoice_service.config import PublicInvoiceSettings
from services.public_invoice_service.dto.invoice_portal_v1 import (
    EnsurePdfResponseV1,
    SubmitSignatureV1,
    ValidateTokenResponseV1,
)

logger = create_service_logger("public_invoice.data_service_client")


class DataServiceClientImpl:
    """HTTP client for the data service invoice portal API.

    Tokens travel as the ``token`` query parameter and are never logged.
    """

    def __init__(self, http_client: httpx.AsyncClient, config: PublicInvoiceSettings) -> None:
        """Initialize with shared HTTP client.

        Args:
            http_client: Shared httpx AsyncClient instance
            config: Service settings with the data service location
        """
        self._client = http_client
        self._config = config

    async def validate_token(self, token: str, correlation_id: UUID) -> ValidateTokenResponseV1:
        """Resolve a token to its invoice snapshot.

        Raises:
            httpx.HTTPError: On transport errors or non-success statuses
            ValueError: When the body is not a valid validation response
        """
        url = self._config.data_service_endpoint("validate")

        logger.debug("Validating portal token", extra={"correlation_id": str(correlation_id)})

        response = await self._client.get(
            url,
            params={"token": token},
            headers=build_internal_headers(self._config, correlation_id),
        )
        response.raise_for_status()

        result = ValidateTokenResponseV1.model_validate(response.json())

        logger.debug(
            "Token validation answered",
            extra={
                "is_valid": result.is_valid,
                "invoice_id": str(result.invoice_id) if result.invoice_id else None,
                "correlation_id": str(correlation_id),
            },
        )
        return result

    async def ensure_pdf_current(self, token: str, correlation_id: UUID) -> EnsurePdfResponseV1:
        """Ask the data service to regenerate the PDF when the invoice changed.

        Raises:
            httpx.HTTPError: On transport errors or non-success statuses
            ValueError: When the body is not a valid ensure-pdf response
        """
        url = self._config.data_service_endpoint("ensure-pdf")

        response = await self._client.get(
            url,
            params={"token": token},
            headers=build_internal_headers(self._config, correlation_id),
        )
        response.raise_for_status()

        result = EnsurePdfResponseV1.model_validate(response.json())

        logger.debug(
            "Ensured PDF is current",
            extra={
                "was_regenerated": result.was_regenerated,
                "has_storage_key": bool(result.storage_key),
                "correlation_id": str(correlation_id),
            },
        )
        return result

    async def mark_viewed(self, token: str, correlation_id: UUID) -> None:
        """Record an invoice view.

        Raises:
            httpx.HTTPError: On transport errors or non-success statuses
        """
        url = self._config.data_service_endpoint("viewed")

        response = await self._client.post(
            url,
            params={"token": token},
            headers=build_internal_headers(self._config, correlation_id),
        )
        response.raise_for_status()

    async def submit_signature(
        self, token: str, signature_path: str, correlation_id: UUID
    ) -> None:
        """Store a signature reference for the invoice.

        Raises:
            httpx.HTTPError: On transport errors or non-success statuses
        """
        url = self._config.data_service_endpoint("signature")
        payload = SubmitSignatureV1(signature_path=signature_path)

        response = await self._client.post(
            url,
            params={"token": token},
            json=payload.model_dump(),
            headers=build_internal_headers(self._config, correlation_id),
        )
        response.raise_for_status()
