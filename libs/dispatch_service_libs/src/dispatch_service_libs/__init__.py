"""
Dispatch Service Libraries Package.

Shared infrastructure used across Dispatch services: structured logging,
the structured error handling framework, settings base classes and the
Result type.
"""

from .result import Result

__all__ = ["Result"]

# Framework-specific error handlers should be imported directly from:
# - dispatch_service_libs.error_handling.fastapi
