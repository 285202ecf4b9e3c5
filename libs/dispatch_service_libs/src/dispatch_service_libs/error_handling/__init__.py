"""
Structured error handling for Dispatch services.

Services raise through the ``raise_*`` factories so every error carries an
ErrorDetail with correlation id, service and operation. Framework handlers
(see ``error_handling.fastapi``) turn them into HTTP responses.
"""

from .dispatch_error import DispatchError
from .factories import (
    raise_artifact_unavailable,
    raise_external_service_error,
    raise_invalid_token,
    raise_invoice_mismatch,
    raise_unknown_error,
    raise_validation_error,
)

__all__ = [
    "DispatchError",
    "raise_artifact_unavailable",
    "raise_external_service_error",
    "raise_invalid_token",
    "raise_invoice_mismatch",
    "raise_unknown_error",
    "raise_validation_error",
]
