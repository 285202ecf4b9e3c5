"""Action Relay.

Forwards the public actions (viewed, signature) to the data service. Both
actions are keyed by the token, never by the caller's invoice id, and are
sent at most once.
"""

from __future__ import annotations

from uuid import UUID

import httpx
from dispatch_service_libs.logging_utils import create_service_logger
from dispatch_service_libs.result import Result

from services.public_invoice_service.protocols import DataServiceClientProtocol

logger = create_service_logger("public_invoice.action_relay")


class SignaturePathError(ValueError):
    """Signature path violates the local constraints."""


class ActionRelay:
    """Relays mutating portal actions to the data service."""

    def __init__(self, data_client: DataServiceClientProtocol, max_signature_length: int) -> None:
        self._data_client = data_client
        self._max_signature_length = max_signature_length

    def check_signature_path(self, signature_path: str) -> Result[str, str]:
        """Check a signature path locally.

        Returns:
            ``Result.ok(signature_path)`` or ``Result.err(message)``
        """
        if not signature_path.strip():
            return Result.err("signature_path is required")
        if len(signature_path) > self._max_signature_length:
            return Result.err(
                f"signature_path must be at most {self._max_signature_length} characters"
            )
        return Result.ok(signature_path)

    async def mark_viewed(self, token: str, correlation_id: UUID) -> bool:
        try:
            await self._data_client.mark_viewed(token, correlation_id)
        except httpx.HTTPError as e:
            logger.error(
                "Failed to mark invoice as viewed",
                error_type=type(e).__name__,
                status_code=_status_of(e),
                correlation_id=str(correlation_id),
            )
            return False
        return True

    async def submit_signature(
        self, token: str, signature_path: str, correlation_id: UUID
    ) -> bool:
        """Submit a signature path.

        Raises:
            SignaturePathError: When the path fails ``check_signature_path``;
                no upstream call is made
        """
        check = self.check_signature_path(signature_path)
        if check.is_err:
            raise SignaturePathError(check.error)

        try:
            await self._data_client.submit_signature(token, signature_path, correlation_id)
        except httpx.HTTPError as e:
            logger.error(
                "Failed to save signature",
                error_type=type(e).__name__,
                status_code=_status_of(e),
                correlation_id=str(correlation_id),
            )
            return False
        return True


def _status_of(error: httpx.HTTPError) -> int | None:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return None
