"""Dependency Injection providers for Public Invoice Service.

Provides Dishka DI container setup with APP-scoped infrastructure
and REQUEST-scoped context providers.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from uuid import UUID, uuid4

import httpx
from dishka import Provider, Scope, from_context, provide
from fastapi import Request
from prometheus_client import REGISTRY, CollectorRegistry

from services.public_invoice_service.clients.data_service_client import DataServiceClientImpl
from services.public_invoice_service.clients.invoice_service_client import (
    InvoiceServiceClientImpl,
)
from services.public_invoice_service.config import PublicInvoiceSettings, settings
from services.public_invoice_service.context import (
    RequestContext,
    get_client_ip,
    get_user_agent,
)
from services.public_invoice_service.metrics import PortalMetrics, upstream_call_recorder
from services.public_invoice_service.portal.access_gate import InvoiceAccessGate
from services.public_invoice_service.portal.action_relay import ActionRelay
from services.public_invoice_service.portal.artifact_resolver import ArtifactFreshnessResolver
from services.public_invoice_service.portal.document_streamer import DocumentStreamer
from services.public_invoice_service.portal.token_validator import TokenValidator
from services.public_invoice_service.protocols import (
    DataServiceClientProtocol,
    InvoiceServiceClientProtocol,
)


class PublicInvoiceProvider(Provider):
    """Infrastructure provider for Public Invoice Service.

    Provides APP-scoped dependencies: config, metrics, HTTP client, service
    clients and portal components.
    """

    scope = Scope.APP

    def __init__(self, config: PublicInvoiceSettings | None = None) -> None:
        super().__init__()
        self._config = config or settings

    @provide
    def get_config(self) -> PublicInvoiceSettings:
        """Provide settings singleton."""
        return self._config

    @provide
    def provide_registry(self) -> CollectorRegistry:
        return REGISTRY

    @provide
    def provide_metrics(self, registry: CollectorRegistry) -> PortalMetrics:
        return PortalMetrics(registry)

    @provide(scope=Scope.APP)
    async def get_http_client(
        self, config: PublicInvoiceSettings, metrics: PortalMetrics
    ) -> AsyncIterator[httpx.AsyncClient]:
        """Provide shared HTTP client with connection pooling."""
        record_upstream_call = upstream_call_recorder(
            metrics,
            {
                config.DATA_SERVICE_URL: "data_service",
                config.INVOICE_SERVICE_URL: "invoice_service",
            },
        )
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(
                config.HTTP_CLIENT_TIMEOUT_SECONDS,
                connect=config.HTTP_CLIENT_CONNECT_TIMEOUT_SECONDS,
            ),
            event_hooks={"response": [record_upstream_call]},
        ) as client:
            yield client

    @provide(scope=Scope.APP)
    def provide_data_service_client(
        self, http_client: httpx.AsyncClient, config: PublicInvoiceSettings
    ) -> DataServiceClientProtocol:
        """Provide data service client singleton."""
        return DataServiceClientImpl(http_client, config)

    @provide(scope=Scope.APP)
    def provide_invoice_service_client(
        self, http_client: httpx.AsyncClient, config: PublicInvoiceSettings
    ) -> InvoiceServiceClientProtocol:
        """Provide invoice service client singleton."""
        return InvoiceServiceClientImpl(http_client, config)

    @provide
    def provide_token_validator(
        self, data_client: DataServiceClientProtocol, config: PublicInvoiceSettings
    ) -> TokenValidator:
        return TokenValidator(data_client, config.TOKEN_MAX_LENGTH)

    @provide
    def provide_access_gate(self, validator: TokenValidator) -> InvoiceAccessGate:
        return InvoiceAccessGate(validator)

    @provide
    def provide_artifact_resolver(
        self, data_client: DataServiceClientProtocol
    ) -> ArtifactFreshnessResolver:
        return ArtifactFreshnessResolver(data_client)

    @provide
    def provide_document_streamer(
        self, invoice_client: InvoiceServiceClientProtocol, config: PublicInvoiceSettings
    ) -> DocumentStreamer:
        return DocumentStreamer(invoice_client, config.STREAM_CHUNK_SIZE)

    @provide
    def provide_action_relay(
        self, data_client: DataServiceClientProtocol, config: PublicInvoiceSettings
    ) -> ActionRelay:
        return ActionRelay(data_client, config.SIGNATURE_PATH_MAX_LENGTH)


class RequestContextProvider(Provider):
    """Request-scoped provider for caller context.

    Correlation ID comes from request state (set by CorrelationIDMiddleware);
    client IP and user agent come from the request headers.
    """

    request = from_context(provides=Request, scope=Scope.REQUEST)

    @provide(scope=Scope.REQUEST)
    def provide_correlation_id(self, request: Request) -> UUID:
        """Provide correlation ID from request state."""
        return getattr(request.state, "correlation_id", uuid4())

    @provide(scope=Scope.REQUEST)
    def provide_request_context(self, request: Request, correlation_id: UUID) -> RequestContext:
        return RequestContext(
            correlation_id=correlation_id,
            client_ip=get_client_ip(request),
            user_agent=get_user_agent(request),
        )
