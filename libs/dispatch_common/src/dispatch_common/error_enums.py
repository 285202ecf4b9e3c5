"""
dispatch_common.error_enums - Centralized error code definitions.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    RATE_LIMIT = "RATE_LIMIT"

    # Public access errors (token-gated endpoints)
    INVALID_TOKEN = "INVALID_TOKEN"
    INVOICE_MISMATCH = "INVOICE_MISMATCH"
    ARTIFACT_UNAVAILABLE = "ARTIFACT_UNAVAILABLE"
