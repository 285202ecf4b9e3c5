"""Artifact Freshness Resolver.

Makes sure the stored PDF reflects the current invoice before it is served.
The "ensure current" call is an idempotent read, so on failure the resolver
falls back to the storage key from the token validation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

import httpx
from dispatch_service_libs.logging_utils import create_service_logger

from services.public_invoice_service.protocols import DataServiceClientProtocol

logger = create_service_logger("public_invoice.artifact_resolver")


class ArtifactOutcome(str, Enum):
    CURRENT = "current"
    REGENERATED = "regenerated"
    FELL_BACK = "fell_back"
    NO_ARTIFACT = "no_artifact"


@dataclass(frozen=True)
class ArtifactReference:
    storage_key: str
    was_regenerated: bool = False


@dataclass(frozen=True)
class ArtifactResolution:
    """Tagged outcome; ``reference`` is None only for NO_ARTIFACT."""

    outcome: ArtifactOutcome
    reference: ArtifactReference | None = None


class ArtifactFreshnessResolver:
    """Resolves the storage key of an up-to-date invoice PDF."""

    def __init__(self, data_client: DataServiceClientProtocol) -> None:
        self._data_client = data_client

    async def ensure_fresh(
        self, token: str, fallback_key: str | None, correlation_id: UUID
    ) -> ArtifactResolution:
        """Ask the data service for a current artifact, falling back when needed.

        Args:
            token: Authorized portal token
            fallback_key: Storage key from the token validation, if any
            correlation_id: Request correlation ID
        """
        failure: str
        try:
            response = await self._data_client.ensure_pdf_current(token, correlation_id)
        except httpx.HTTPError as e:
            failure = type(e).__name__
        except ValueError:
            failure = "malformed_response"
        else:
            if response.storage_key:
                outcome = (
                    ArtifactOutcome.REGENERATED
                    if response.was_regenerated
                    else ArtifactOutcome.CURRENT
                )
                logger.info(
                    "Invoice PDF resolved",
                    outcome=outcome.value,
                    correlation_id=str(correlation_id),
                )
                return ArtifactResolution(
                    outcome=outcome,
                    reference=ArtifactReference(
                        storage_key=response.storage_key,
                        was_regenerated=response.was_regenerated,
                    ),
                )
            failure = "empty_storage_key"

        if fallback_key:
            logger.warning(
                "Failed to ensure PDF is current, falling back to existing PDF",
                failure=failure,
                correlation_id=str(correlation_id),
            )
            return ArtifactResolution(
                outcome=ArtifactOutcome.FELL_BACK,
                reference=ArtifactReference(storage_key=fallback_key),
            )

        logger.error(
            "No invoice PDF available",
            failure=failure,
            correlation_id=str(correlation_id),
        )
        return ArtifactResolution(outcome=ArtifactOutcome.NO_ARTIFACT)
