"""Public Invoice Service - token-gated public access to invoices.

Lets invoice recipients view, download, acknowledge and sign an invoice
through an emailed link, without an account.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import uuid4

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from dispatch_common.error_enums import ErrorCode
from dispatch_service_libs.error_handling.fastapi import error_response
from dispatch_service_libs.error_handling.fastapi import (
    register_error_handlers as register_fastapi_error_handlers,
)
from dispatch_service_libs.logging_utils import configure_service_logging, create_service_logger
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.requests import Request
from starlette.responses import JSONResponse

from services.public_invoice_service.api.health_routes import router as health_router
from services.public_invoice_service.api.public_invoice_routes import router as public_router
from services.public_invoice_service.config import PublicInvoiceSettings, settings
from services.public_invoice_service.context import get_client_ip
from services.public_invoice_service.di import PublicInvoiceProvider, RequestContextProvider
from services.public_invoice_service.middleware import CorrelationIDMiddleware
from services.public_invoice_service.rate_limiter import configure_limiter

logger = create_service_logger("public_invoice_service")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await app.state.di_container.close()


def create_app(
    config: PublicInvoiceSettings | None = None,
    container: AsyncContainer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings to use instead of the module-level singleton
        container: Prebuilt DI container (tests pass one with test providers)
    """
    config = config or settings

    configure_service_logging(
        config.SERVICE_NAME,
        environment=config.ENVIRONMENT.value,
        log_level=config.LOG_LEVEL,
    )

    app = FastAPI(
        title=config.SERVICE_NAME,
        version="0.1.0",
        description="Public Invoice Service - token-gated invoice access for recipients",
        docs_url="/docs" if config.is_development() else None,
        redoc_url=None,
        openapi_url="/openapi.json" if config.is_development() else None,
        lifespan=lifespan,
    )

    # Register error handlers
    register_fastapi_error_handlers(app)

    # Rate limiting (keyed by client IP) is applied by the public route decorators
    app.state.limiter = configure_limiter(config)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        correlation_id = getattr(request.state, "correlation_id", None) or uuid4()
        logger.warning(
            "Rate limit exceeded",
            client_ip=get_client_ip(request),
            limit=str(exc.detail),
            path=request.url.path,
        )
        return error_response(429, ErrorCode.RATE_LIMIT, "Rate limit exceeded", correlation_id)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=config.CORS_ALLOW_METHODS,
        allow_headers=config.CORS_ALLOW_HEADERS,
    )

    # Correlation ID Middleware is added last so it wraps every other layer
    app.add_middleware(CorrelationIDMiddleware)

    app.include_router(health_router)
    app.include_router(public_router)

    # Setup Dishka DI container
    if container is None:
        container = make_async_container(
            PublicInvoiceProvider(config),
            RequestContextProvider(),
            FastapiProvider(),
        )
    setup_dishka(container, app)
    app.state.di_container = container

    logger.info(
        "Public Invoice Service configured",
        environment=config.ENVIRONMENT.value,
        rate_limit_enabled=config.RATE_LIMIT_ENABLED,
    )

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.public_invoice_service.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
        log_level=settings.LOG_LEVEL.lower(),
    )
