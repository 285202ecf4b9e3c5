"""Public Invoice Service middleware components."""

from __future__ import annotations

from uuid import UUID, uuid4

from dispatch_service_libs.logging_utils import bind_request_context
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from services.public_invoice_service.context import get_client_ip, get_user_agent


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Middleware to ensure every request has a correlation ID.

    Also binds correlation ID, client IP and user agent to the logging
    context for the lifetime of the request.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Extract or generate correlation ID and store in request state."""
        x_correlation_id = request.headers.get("X-Correlation-ID")
        if x_correlation_id:
            try:
                correlation_id = UUID(x_correlation_id)
            except ValueError:
                correlation_id = uuid4()
        else:
            correlation_id = uuid4()

        request.state.correlation_id = correlation_id
        bind_request_context(
            correlation_id=str(correlation_id),
            client_ip=get_client_ip(request),
            user_agent=get_user_agent(request),
        )

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = str(correlation_id)
        return response
