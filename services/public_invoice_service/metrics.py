"""Metrics definitions for the Public Invoice Service."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import httpx
from prometheus_client import REGISTRY, CollectorRegistry, Counter


class PortalMetrics:
    """A container for all Prometheus metrics for the Public Invoice Service."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics with optional registry for test isolation."""
        if registry is None:
            registry = REGISTRY
        self.public_requests_total = Counter(
            "public_invoice_requests_total",
            "Total number of public invoice requests by outcome.",
            ["endpoint", "outcome"],
            registry=registry,
        )
        self.access_rejections_total = Counter(
            "public_invoice_access_rejections_total",
            "Total number of requests rejected by the access gate.",
            ["endpoint", "reason"],
            registry=registry,
        )
        self.artifact_resolutions_total = Counter(
            "public_invoice_artifact_resolutions_total",
            "Total number of invoice PDF freshness resolutions by outcome.",
            ["outcome"],
            registry=registry,
        )
        self.upstream_calls_total = Counter(
            "public_invoice_upstream_calls_total",
            "Total number of calls to upstream services.",
            ["service", "operation", "status_code"],
            registry=registry,
        )


def upstream_call_recorder(
    metrics: PortalMetrics, services: dict[str, str]
) -> Callable[[httpx.Response], Awaitable[None]]:
    """Build an httpx response hook counting upstream calls.

    Args:
        metrics: Metrics container
        services: Base URL to service label mapping
    """

    async def record(response: httpx.Response) -> None:
        url = str(response.request.url)
        service = next(
            (name for base_url, name in services.items() if url.startswith(base_url)),
            "unknown",
        )
        operation = response.request.url.path.rstrip("/").rsplit("/", 1)[-1]
        metrics.upstream_calls_total.labels(
            service=service, operation=operation, status_code=str(response.status_code)
        ).inc()

    return record
