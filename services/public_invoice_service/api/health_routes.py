"""Health and metrics routes for Public Invoice Service."""

from __future__ import annotations

from dishka import FromDishka
from dishka.integrations.fastapi import inject
from dispatch_service_libs.logging_utils import create_service_logger
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from services.public_invoice_service.config import PublicInvoiceSettings

router = APIRouter(tags=["Health"])
logger = create_service_logger("public_invoice.health_routes")


@router.get("/healthz")
@inject
async def health_check(config: FromDishka[PublicInvoiceSettings]) -> dict[str, str | dict]:
    """Health check endpoint.

    Upstream services are not probed; their availability is checked per request.
    """
    checks = {"service_responsive": True}
    dependencies = {
        "data_service": {
            "status": "configured",
            "note": "Token validation, freshness and actions checked on request",
        },
        "invoice_service": {
            "status": "configured",
            "note": "Document storage availability checked on request",
        },
    }

    return {
        "service": "public_invoice_service",
        "status": "healthy",
        "message": "Public Invoice Service is healthy",
        "version": "0.1.0",
        "checks": checks,
        "dependencies": dependencies,
        "environment": config.ENVIRONMENT.value,
    }


@router.get("/metrics", response_class=PlainTextResponse)
@inject
async def metrics(registry: FromDishka[CollectorRegistry]) -> PlainTextResponse:
    """Prometheus metrics endpoint."""
    try:
        metrics_data = generate_latest(registry)
        return PlainTextResponse(content=metrics_data, media_type=CONTENT_TYPE_LATEST)
    except Exception as e:
        logger.error(f"Error generating metrics: {e}", exc_info=True)
        return PlainTextResponse(content="Error generating metrics", status_code=500)
