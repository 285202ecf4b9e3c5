"""Public invoice routes.

Anonymous, token-gated endpoints under ``/public/invoices/{invoice_id}/{token}``.
Every endpoint passes the access gate before it calls anything that returns
invoice data or changes state.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from dishka.integrations.fastapi import FromDishka, inject
from dispatch_service_libs.error_handling import (
    DispatchError,
    raise_artifact_unavailable,
    raise_external_service_error,
    raise_invalid_token,
    raise_invoice_mismatch,
    raise_unknown_error,
    raise_validation_error,
)
from dispatch_service_libs.logging_utils import create_service_logger
from fastapi import APIRouter, Header, Request
from starlette.background import BackgroundTask
from starlette.responses import StreamingResponse

from services.public_invoice_service.context import RequestContext
from services.public_invoice_service.dto.invoice_portal_v1 import (
    PublicActionResponseV1,
    PublicInvoiceResponseV1,
    SubmitSignatureRequestV1,
)
from services.public_invoice_service.metrics import PortalMetrics
from services.public_invoice_service.portal.access_gate import (
    AccessRejection,
    AuthorizedAccess,
    InvoiceAccessGate,
)
from services.public_invoice_service.portal.action_relay import ActionRelay
from services.public_invoice_service.portal.artifact_resolver import (
    ArtifactFreshnessResolver,
    ArtifactOutcome,
)
from services.public_invoice_service.portal.document_streamer import DocumentStreamer
from services.public_invoice_service.rate_limiter import limiter, public_rate_limit

router = APIRouter(prefix="/public/invoices", tags=["Public Invoices"])
logger = create_service_logger("public_invoice.routes")

SERVICE = "public_invoice_service"
DUE_ON_RECEIPT = "On receipt"


def format_long_date(value: datetime | None, default: str = "") -> str:
    """Render a date as e.g. "Friday, October 17, 2026"."""
    if value is None:
        return default
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


async def _admit(
    gate: InvoiceAccessGate,
    metrics: PortalMetrics,
    context: RequestContext,
    operation: str,
    invoice_id: UUID,
    token: str,
) -> AuthorizedAccess:
    """Run the access gate and raise the matching error on rejection."""
    decision = await gate.admit(invoice_id, token, context.correlation_id)
    if decision.is_ok:
        return decision.value

    denied = decision.error
    metrics.access_rejections_total.labels(endpoint=operation, reason=denied.reason.value).inc()

    if denied.reason is AccessRejection.INVALID_TOKEN:
        logger.warning(
            "Invalid token access attempt",
            invoice_id=str(invoice_id),
            reason=denied.detail,
            client_ip=context.client_ip,
            user_agent=context.user_agent,
        )
        raise_invalid_token(
            service=SERVICE,
            operation=operation,
            correlation_id=context.correlation_id,
            message="Invalid token",
            invoice_id=str(invoice_id),
            reason=denied.detail,
        )

    if denied.reason is AccessRejection.INVOICE_MISMATCH:
        logger.warning(
            "Token invoice mismatch",
            invoice_id=str(invoice_id),
            token_invoice_id=str(denied.bound_invoice_id),
            client_ip=context.client_ip,
            user_agent=context.user_agent,
        )
        raise_invoice_mismatch(
            service=SERVICE,
            operation=operation,
            correlation_id=context.correlation_id,
            requested_invoice_id=str(invoice_id),
            token_invoice_id=str(denied.bound_invoice_id) if denied.bound_invoice_id else None,
        )

    upstream = denied.upstream
    raise_external_service_error(
        service=SERVICE,
        operation=operation,
        external_service=upstream.service if upstream else "data_service",
        message="Service temporarily unavailable",
        correlation_id=context.correlation_id,
        invoice_id=str(invoice_id),
        reason=upstream.reason if upstream else None,
        status_code=upstream.status_code if upstream else None,
    )


@router.get("/{invoice_id}/{token}", response_model=PublicInvoiceResponseV1)
@limiter.limit(public_rate_limit)
@inject
async def get_public_invoice(
    request: Request,  # Required for rate limiting
    invoice_id: UUID,
    token: str,
    gate: FromDishka[InvoiceAccessGate],
    metrics: FromDishka[PortalMetrics],
    context: FromDishka[RequestContext],
) -> PublicInvoiceResponseV1:
    """Get invoice metadata for the public invoice page.

    Read-only: does not mark the invoice as viewed.
    """
    operation = "get_public_invoice"
    try:
        access = await _admit(gate, metrics, context, operation, invoice_id, token)
        snapshot = access.snapshot

        if not snapshot.pdf_storage_key:
            logger.error("Invoice has no PDF storage key", invoice_id=str(invoice_id))
            raise_artifact_unavailable(
                service=SERVICE,
                operation=operation,
                correlation_id=context.correlation_id,
                invoice_id=str(invoice_id),
            )

        logger.info("Public invoice accessed", invoice_id=str(invoice_id))
        metrics.public_requests_total.labels(endpoint=operation, outcome="success").inc()

        return PublicInvoiceResponseV1(
            invoice_id=snapshot.invoice_id,
            invoice_number=snapshot.invoice_number,
            date=format_long_date(snapshot.invoice_date),
            due_date=format_long_date(snapshot.invoice_due_date, default=DUE_ON_RECEIPT),
            signature_path=snapshot.signature_path or "",
            viewed=snapshot.viewed,
        )

    except DispatchError as e:
        metrics.public_requests_total.labels(endpoint=operation, outcome=e.error_code).inc()
        raise
    except Exception as e:
        logger.error(
            "Unexpected error getting public invoice",
            invoice_id=str(invoice_id),
            error=str(e),
            exc_info=True,
        )
        raise_unknown_error(
            service=SERVICE,
            operation=operation,
            message="Internal server error",
            correlation_id=context.correlation_id,
            error_type=type(e).__name__,
        )


@router.get("/{invoice_id}/{token}/file", response_class=StreamingResponse)
@limiter.limit(public_rate_limit)
@inject
async def get_public_invoice_file(
    request: Request,  # Required for rate limiting
    invoice_id: UUID,
    token: str,
    gate: FromDishka[InvoiceAccessGate],
    resolver: FromDishka[ArtifactFreshnessResolver],
    streamer: FromDishka[DocumentStreamer],
    metrics: FromDishka[PortalMetrics],
    context: FromDishka[RequestContext],
    range_header: str | None = Header(default=None, alias="Range"),
) -> StreamingResponse:
    """Stream the invoice PDF, regenerating it first when it is stale.

    Supports single byte-range requests (206) for inline PDF viewers.
    """
    operation = "get_public_invoice_file"
    try:
        access = await _admit(gate, metrics, context, operation, invoice_id, token)

        resolution = await resolver.ensure_fresh(
            access.token, access.snapshot.pdf_storage_key, context.correlation_id
        )
        metrics.artifact_resolutions_total.labels(outcome=resolution.outcome.value).inc()

        if resolution.outcome is ArtifactOutcome.NO_ARTIFACT or resolution.reference is None:
            raise_artifact_unavailable(
                service=SERVICE,
                operation=operation,
                correlation_id=context.correlation_id,
                invoice_id=str(invoice_id),
            )

        opened = await streamer.open(
            resolution.reference.storage_key,
            context.correlation_id,
            range_header=range_header,
        )
        if opened.is_err:
            failure = opened.error
            raise_external_service_error(
                service=SERVICE,
                operation=operation,
                external_service="invoice_service",
                message="PDF temporarily unavailable",
                correlation_id=context.correlation_id,
                invoice_id=str(invoice_id),
                reason=failure.reason,
                status_code=failure.status_code,
            )

        stream = opened.value
        logger.info(
            "Streaming invoice PDF",
            invoice_id=str(invoice_id),
            status_code=stream.status_code,
            artifact_outcome=resolution.outcome.value,
        )
        metrics.public_requests_total.labels(
            endpoint=operation, outcome=str(stream.status_code)
        ).inc()

        return StreamingResponse(
            stream.iter_bytes(),
            status_code=stream.status_code,
            headers=stream.headers,
            media_type=stream.media_type,
            background=BackgroundTask(stream.aclose),
        )

    except DispatchError as e:
        metrics.public_requests_total.labels(endpoint=operation, outcome=e.error_code).inc()
        raise
    except Exception as e:
        logger.error(
            "Unexpected error streaming invoice PDF",
            invoice_id=str(invoice_id),
            error=str(e),
            exc_info=True,
        )
        raise_unknown_error(
            service=SERVICE,
            operation=operation,
            message="Internal server error",
            correlation_id=context.correlation_id,
            error_type=type(e).__name__,
        )


@router.post("/{invoice_id}/{token}/viewed", response_model=PublicActionResponseV1)
@limiter.limit(public_rate_limit)
@inject
async def mark_public_invoice_viewed(
    request: Request,  # Required for rate limiting
    invoice_id: UUID,
    token: str,
    gate: FromDishka[InvoiceAccessGate],
    relay: FromDishka[ActionRelay],
    metrics: FromDishka[PortalMetrics],
    context: FromDishka[RequestContext],
) -> PublicActionResponseV1:
    """Mark the invoice as viewed."""
    operation = "mark_public_invoice_viewed"
    try:
        access = await _admit(gate, metrics, context, operation, invoice_id, token)

        if not await relay.mark_viewed(access.token, context.correlation_id):
            raise_external_service_error(
                service=SERVICE,
                operation=operation,
                external_service="data_service",
                message="Failed to mark as viewed",
                correlation_id=context.correlation_id,
                invoice_id=str(invoice_id),
            )

        logger.info("Invoice marked as viewed", invoice_id=str(invoice_id))
        metrics.public_requests_total.labels(endpoint=operation, outcome="success").inc()
        return PublicActionResponseV1(success=True, message="Invoice marked as viewed")

    except DispatchError as e:
        metrics.public_requests_total.labels(endpoint=operation, outcome=e.error_code).inc()
        raise
    except Exception as e:
        logger.error(
            "Unexpected error marking invoice as viewed",
            invoice_id=str(invoice_id),
            error=str(e),
            exc_info=True,
        )
        raise_unknown_error(
            service=SERVICE,
            operation=operation,
            message="Internal server error",
            correlation_id=context.correlation_id,
            error_type=type(e).__name__,
        )


@router.post("/{invoice_id}/{token}/signature", response_model=PublicActionResponseV1)
@limiter.limit(public_rate_limit)
@inject
async def submit_public_invoice_signature(
    request: Request,  # Required for rate limiting
    invoice_id: UUID,
    token: str,
    body: SubmitSignatureRequestV1,
    gate: FromDishka[InvoiceAccessGate],
    relay: FromDishka[ActionRelay],
    metrics: FromDishka[PortalMetrics],
    context: FromDishka[RequestContext],
) -> PublicActionResponseV1:
    """Submit the signature reference for the invoice."""
    operation = "submit_public_invoice_signature"
    try:
        # Payload constraints are checked before the token is looked up
        check = relay.check_signature_path(body.signature_path)
        if check.is_err:
            raise_validation_error(
                service=SERVICE,
                operation=operation,
                field="signature_path",
                message=check.error,
                correlation_id=context.correlation_id,
                length=len(body.signature_path),
            )

        access = await _admit(gate, metrics, context, operation, invoice_id, token)

        if not await relay.submit_signature(
            access.token, body.signature_path, context.correlation_id
        ):
            raise_external_service_error(
                service=SERVICE,
                operation=operation,
                external_service="data_service",
                message="Failed to save signature",
                correlation_id=context.correlation_id,
                invoice_id=str(invoice_id),
            )

        logger.info("Signature submitted", invoice_id=str(invoice_id))
        metrics.public_requests_total.labels(endpoint=operation, outcome="success").inc()
        return PublicActionResponseV1(success=True, message="Signature submitted successfully")

    except DispatchError as e:
        metrics.public_requests_total.labels(endpoint=operation, outcome=e.error_code).inc()
        raise
    except Exception as e:
        logger.error(
            "Unexpected error submitting signature",
            invoice_id=str(invoice_id),
            error=str(e),
            exc_info=True,
        )
        raise_unknown_error(
            service=SERVICE,
            operation=operation,
            message="Internal server error",
            correlation_id=context.correlation_id,
            error_type=type(e).__name__,
        )
