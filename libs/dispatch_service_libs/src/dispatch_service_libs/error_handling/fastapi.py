"""FastAPI integration for the Dispatch error handling framework.

Public responses only ever contain the error code, a generic message and the
correlation id. Details and exception text go to the logs.
"""

from __future__ import annotations

from uuid import UUID, uuid4

from dispatch_common.error_enums import ErrorCode
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dispatch_service_libs.logging_utils import create_service_logger

from .dispatch_error import DispatchError

logger = create_service_logger("error_handling.fastapi")

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_TOKEN: 401,
    ErrorCode.INVOICE_MISMATCH: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.RATE_LIMIT: 429,
    ErrorCode.ARTIFACT_UNAVAILABLE: 500,
    ErrorCode.EXTERNAL_SERVICE_ERROR: 500,
    ErrorCode.UNKNOWN_ERROR: 500,
}


def _correlation_id_from(request: Request) -> UUID:
    return getattr(request.state, "correlation_id", None) or uuid4()


def error_response(
    status_code: int, code: ErrorCode, message: str, correlation_id: UUID | str
) -> JSONResponse:
    """Build the public error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "code": code.value,
                "message": message,
                "correlation_id": str(correlation_id),
            },
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register Dispatch exception handlers on a FastAPI application."""

    @app.exception_handler(DispatchError)
    async def handle_dispatch_error(request: Request, exc: DispatchError) -> JSONResponse:
        detail = exc.error_detail
        status_code = ERROR_CODE_TO_STATUS.get(detail.error_code, 500)
        log = logger.error if status_code >= 500 else logger.warning
        log(
            detail.message,
            error_code=detail.error_code.value,
            service=detail.service,
            operation=detail.operation,
            correlation_id=str(detail.correlation_id),
            details=detail.details,
            path=request.url.path,
        )
        return error_response(
            status_code, detail.error_code, detail.message, detail.correlation_id
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        correlation_id = _correlation_id_from(request)
        logger.warning(
            "Request validation failed",
            correlation_id=str(correlation_id),
            path=request.url.path,
            errors=[
                {"loc": list(error.get("loc", ())), "type": error.get("type")}
                for error in exc.errors()
            ],
        )
        return error_response(400, ErrorCode.VALIDATION_ERROR, "Invalid request data", correlation_id)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        correlation_id = _correlation_id_from(request)
        logger.error(
            "Unhandled error",
            correlation_id=str(correlation_id),
            path=request.url.path,
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        return error_response(500, ErrorCode.UNKNOWN_ERROR, "Internal server error", correlation_id)
