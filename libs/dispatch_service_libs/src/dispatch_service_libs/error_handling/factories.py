"""
Factory functions for raising structured Dispatch errors.

Each factory builds an ErrorDetail and raises a DispatchError. Extra keyword
arguments end up in ``details``; they are logged by the framework handlers
but never returned to public callers.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, NoReturn
from uuid import UUID

from dispatch_common.error_enums import ErrorCode
from dispatch_common.models.error_models import ErrorDetail

from .dispatch_error import DispatchError


def _raise(
    error_code: ErrorCode,
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID,
    details: dict[str, Any],
) -> NoReturn:
    error_detail = ErrorDetail(
        error_code=error_code,
        message=message,
        correlation_id=correlation_id,
        timestamp=datetime.now(UTC),
        service=service,
        operation=operation,
        details=details,
    )
    raise DispatchError(error_detail)


def raise_unknown_error(
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    """Raise an unexpected internal fault (500)."""
    _raise(
        ErrorCode.UNKNOWN_ERROR, service, operation, message, correlation_id, additional_context
    )


def raise_validation_error(
    service: str,
    operation: str,
    field: str,
    message: str,
    correlation_id: UUID,
    value: Any = None,
    **additional_context: Any,
) -> NoReturn:
    """Raise a local input constraint violation (400)."""
    details: dict[str, Any] = {"field": field, **additional_context}
    if value is not None:
        details["value"] = value
    _raise(ErrorCode.VALIDATION_ERROR, service, operation, message, correlation_id, details)


def raise_invalid_token(
    service: str,
    operation: str,
    correlation_id: UUID,
    message: str = "Invalid or expired token",
    **additional_context: Any,
) -> NoReturn:
    """Raise for a token the authority did not accept (401)."""
    _raise(
        ErrorCode.INVALID_TOKEN, service, operation, message, correlation_id, additional_context
    )


def raise_invoice_mismatch(
    service: str,
    operation: str,
    correlation_id: UUID,
    requested_invoice_id: str,
    token_invoice_id: str | None,
    message: str = "Token does not match invoice",
    **additional_context: Any,
) -> NoReturn:
    """Raise when a valid token is presented for another invoice (400)."""
    details = {
        "requested_invoice_id": requested_invoice_id,
        "token_invoice_id": token_invoice_id,
        **additional_context,
    }
    _raise(ErrorCode.INVOICE_MISMATCH, service, operation, message, correlation_id, details)


def raise_artifact_unavailable(
    service: str,
    operation: str,
    correlation_id: UUID,
    message: str = "PDF not available",
    **additional_context: Any,
) -> NoReturn:
    """Raise when no document artifact can be produced (500)."""
    _raise(
        ErrorCode.ARTIFACT_UNAVAILABLE,
        service,
        operation,
        message,
        correlation_id,
        additional_context,
    )


def raise_external_service_error(
    service: str,
    operation: str,
    external_service: str,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    """Raise when an upstream authority failed or was unreachable (500)."""
    details = {"external_service": external_service, **additional_context}
    _raise(ErrorCode.EXTERNAL_SERVICE_ERROR, service, operation, message, correlation_id, details)
