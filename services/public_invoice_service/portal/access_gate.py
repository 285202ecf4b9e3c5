"""Invoice Access Gate.

The single chokepoint every public entry point passes before any
data-returning or mutating upstream call: the token must be valid and bound
to the invoice id in the path.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from dispatch_service_libs.result import Result

from services.public_invoice_service.portal.token_validator import (
    InvalidToken,
    InvoiceSnapshot,
    TokenValidation,
    TokenValidator,
    UpstreamFailure,
)


class AccessRejection(str, Enum):
    INVALID_TOKEN = "invalid_token"
    INVOICE_MISMATCH = "invoice_mismatch"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"


@dataclass(frozen=True)
class AuthorizedAccess:
    """Snapshot and token of an admitted request, passed on unchanged."""

    token: str
    snapshot: InvoiceSnapshot


@dataclass(frozen=True)
class AccessDenied:
    reason: AccessRejection
    detail: str | None = None
    bound_invoice_id: UUID | None = None
    upstream: UpstreamFailure | None = None


def authorize(
    path_invoice_id: UUID, validation: TokenValidation
) -> Result[AuthorizedAccess, AccessDenied]:
    """Bind a token validation to the invoice id the caller asked for."""
    if isinstance(validation, InvalidToken):
        return Result.err(
            AccessDenied(reason=AccessRejection.INVALID_TOKEN, detail=validation.reason)
        )

    bound_invoice_id = validation.snapshot.invoice_id
    if bound_invoice_id != path_invoice_id:
        return Result.err(
            AccessDenied(
                reason=AccessRejection.INVOICE_MISMATCH, bound_invoice_id=bound_invoice_id
            )
        )

    return Result.ok(AuthorizedAccess(token=validation.token, snapshot=validation.snapshot))


class InvoiceAccessGate:
    """Composes token validation with the invoice binding check."""

    def __init__(self, validator: TokenValidator) -> None:
        self._validator = validator

    async def admit(
        self, invoice_id: UUID, token: str, correlation_id: UUID
    ) -> Result[AuthorizedAccess, AccessDenied]:
        validation = await self._validator.validate(token, correlation_id)
        if validation.is_err:
            return Result.err(
                AccessDenied(
                    reason=AccessRejection.UPSTREAM_UNAVAILABLE, upstream=validation.error
                )
            )
        return authorize(invoice_id, validation.value)
