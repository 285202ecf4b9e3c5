"""Token Validator.

Resolves an opaque portal token to the invoice snapshot it authorizes by
asking the data service. Authority outages are failures; malformed answers
are treated as invalid tokens.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

import httpx
from dispatch_service_libs.logging_utils import create_service_logger
from dispatch_service_libs.result import Result

from services.public_invoice_service.dto.invoice_portal_v1 import ValidateTokenResponseV1
from services.public_invoice_service.protocols import DataServiceClientProtocol

logger = create_service_logger("public_invoice.token_validator")

# RFC 3986 unreserved characters plus '=' for base64url padding
_URL_SAFE_TOKEN = re.compile(r"[A-Za-z0-9\-._~=]+")

DATA_SERVICE = "data_service"


@dataclass(frozen=True)
class InvoiceSnapshot:
    """Invoice data returned alongside a valid token."""

    invoice_id: UUID
    invoice_number: str
    invoice_date: datetime | None
    invoice_due_date: datetime | None
    pdf_storage_key: str | None
    signature_path: str | None
    viewed: bool


@dataclass(frozen=True)
class ValidToken:
    token: str
    snapshot: InvoiceSnapshot


@dataclass(frozen=True)
class InvalidToken:
    reason: str


TokenValidation = ValidToken | InvalidToken


@dataclass(frozen=True)
class UpstreamFailure:
    """An upstream authority could not be reached or answered with an error."""

    service: str
    operation: str
    reason: str
    status_code: int | None = None


class TokenValidator:
    """Validates portal tokens against the data service."""

    def __init__(self, data_client: DataServiceClientProtocol, max_token_length: int) -> None:
        self._data_client = data_client
        self._max_token_length = max_token_length

    def is_well_formed(self, token: str) -> bool:
        """Local shape check: non-empty, bounded and URL-safe."""
        return (
            0 < len(token) <= self._max_token_length
            and _URL_SAFE_TOKEN.fullmatch(token) is not None
        )

    async def validate(
        self, token: str, correlation_id: UUID
    ) -> Result[TokenValidation, UpstreamFailure]:
        """Validate a token.

        Returns:
            ``Result.ok(ValidToken | InvalidToken)`` when the authority gave an
            answer (or the token was rejected locally), ``Result.err`` when the
            authority was unavailable.
        """
        if not self.is_well_formed(token):
            logger.info(
                "Token rejected by local shape check",
                token_length=len(token),
                correlation_id=str(correlation_id),
            )
            return Result.ok(InvalidToken(reason="malformed_token"))

        try:
            response = await self._data_client.validate_token(token, correlation_id)
        except httpx.HTTPStatusError as e:
            logger.error(
                "Token authority returned an error status",
                status_code=e.response.status_code,
                correlation_id=str(correlation_id),
            )
            return Result.err(
                UpstreamFailure(
                    service=DATA_SERVICE,
                    operation="validate_token",
                    reason="error_status",
                    status_code=e.response.status_code,
                )
            )
        except httpx.HTTPError as e:
            logger.error(
                "Token authority unreachable",
                error_type=type(e).__name__,
                correlation_id=str(correlation_id),
            )
            return Result.err(
                UpstreamFailure(
                    service=DATA_SERVICE, operation="validate_token", reason=type(e).__name__
                )
            )
        except ValueError as e:
            # Undecodable or schema-violating body: fail closed
            logger.warning(
                "Malformed token validation response",
                error=str(e),
                correlation_id=str(correlation_id),
            )
            return Result.ok(InvalidToken(reason="malformed_response"))

        return Result.ok(_to_validation(token, response))


def _to_validation(token: str, response: ValidateTokenResponseV1) -> TokenValidation:
    if not response.is_valid:
        return InvalidToken(reason=response.error or "rejected")
    if response.invoice_id is None:
        return InvalidToken(reason="missing_invoice_id")

    return ValidToken(
        token=token,
        snapshot=InvoiceSnapshot(
            invoice_id=response.invoice_id,
            invoice_number=response.invoice_number or "",
            invoice_date=response.invoice_date,
            invoice_due_date=response.invoice_due_date,
            pdf_storage_key=response.pdf_storage_key or None,
            signature_path=response.signature_path,
            viewed=response.viewed,
        ),
    )
