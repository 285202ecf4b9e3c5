"""Unit tests for the artifact freshness resolver."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import httpx
import pytest

from services.public_invoice_service.dto.invoice_portal_v1 import EnsurePdfResponseV1
from services.public_invoice_service.portal.artifact_resolver import (
    ArtifactFreshnessResolver,
    ArtifactOutcome,
)
from services.public_invoice_service.protocols import DataServiceClientProtocol

CORRELATION_ID = uuid4()
FALLBACK_KEY = "invoices/old.pdf"
LOGGER_PATH = "services.public_invoice_service.portal.artifact_resolver.logger"


@pytest.fixture
def data_client() -> AsyncMock:
    return AsyncMock(spec=DataServiceClientProtocol)


@pytest.fixture
def resolver(data_client: AsyncMock) -> ArtifactFreshnessResolver:
    return ArtifactFreshnessResolver(data_client)


@pytest.mark.asyncio
async def test_regenerated_artifact(
    resolver: ArtifactFreshnessResolver, data_client: AsyncMock
) -> None:
    data_client.ensure_pdf_current.return_value = EnsurePdfResponseV1(
        storage_key="invoices/new.pdf", was_regenerated=True
    )

    resolution = await resolver.ensure_fresh("tok", FALLBACK_KEY, CORRELATION_ID)

    assert resolution.outcome is ArtifactOutcome.REGENERATED
    assert resolution.reference is not None
    assert resolution.reference.storage_key == "invoices/new.pdf"
    assert resolution.reference.was_regenerated is True


@pytest.mark.asyncio
async def test_current_artifact(
    resolver: ArtifactFreshnessResolver, data_client: AsyncMock
) -> None:
    data_client.ensure_pdf_current.return_value = EnsurePdfResponseV1(
        storage_key=FALLBACK_KEY, was_regenerated=False
    )

    resolution = await resolver.ensure_fresh("tok", FALLBACK_KEY, CORRELATION_ID)

    assert resolution.outcome is ArtifactOutcome.CURRENT
    assert resolution.reference.storage_key == FALLBACK_KEY


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [
        httpx.ConnectError("refused"),
        httpx.HTTPStatusError(
            "boom",
            request=httpx.Request("GET", "http://data-service.test"),
            response=httpx.Response(500),
        ),
        ValueError("malformed"),
    ],
)
async def test_failed_call_falls_back_with_warning(
    resolver: ArtifactFreshnessResolver, data_client: AsyncMock, failure: Exception
) -> None:
    data_client.ensure_pdf_current.side_effect = failure

    with patch(LOGGER_PATH) as mock_logger:
        resolution = await resolver.ensure_fresh("tok", FALLBACK_KEY, CORRELATION_ID)

    assert resolution.outcome is ArtifactOutcome.FELL_BACK
    assert resolution.reference.storage_key == FALLBACK_KEY
    assert resolution.reference.was_regenerated is False
    mock_logger.warning.assert_called_once()


@pytest.mark.asyncio
async def test_empty_storage_key_falls_back(
    resolver: ArtifactFreshnessResolver, data_client: AsyncMock
) -> None:
    data_client.ensure_pdf_current.return_value = EnsurePdfResponseV1(storage_key="")

    with patch(LOGGER_PATH) as mock_logger:
        resolution = await resolver.ensure_fresh("tok", FALLBACK_KEY, CORRELATION_ID)

    assert resolution.outcome is ArtifactOutcome.FELL_BACK
    mock_logger.warning.assert_called_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("fallback_key", [None, ""])
async def test_no_artifact_when_both_empty(
    resolver: ArtifactFreshnessResolver, data_client: AsyncMock, fallback_key: str | None
) -> None:
    data_client.ensure_pdf_current.side_effect = httpx.ReadTimeout("slow")

    resolution = await resolver.ensure_fresh("tok", fallback_key, CORRELATION_ID)

    assert resolution.outcome is ArtifactOutcome.NO_ARTIFACT
    assert resolution.reference is None
