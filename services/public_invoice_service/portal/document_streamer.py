"""Document Streamer.

Relays PDF bytes from the invoice service without buffering them. Range
requests are forwarded; when the storage authority ignores the range and
sends the whole document, the requested slice is cut out while relaying.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from uuid import UUID

import httpx
from dispatch_service_libs.logging_utils import create_service_logger
from dispatch_service_libs.result import Result

from services.public_invoice_service.portal.byte_ranges import (
    ByteRange,
    UnsatisfiableRange,
    parse_byte_range,
)
from services.public_invoice_service.protocols import InvoiceServiceClientProtocol

logger = create_service_logger("public_invoice.document_streamer")

PDF_MEDIA_TYPE = "application/pdf"

# Upstream headers passed through to the caller
_RELAYED_HEADERS = (
    "content-length",
    "content-range",
    "content-encoding",
    "etag",
    "last-modified",
)


@dataclass(frozen=True)
class StreamFailure:
    reason: str
    status_code: int | None = None


class DocumentStream:
    """An open document response, valid for a single caller response.

    ``iter_bytes`` closes the upstream response when it finishes, fails or
    is abandoned by a disconnecting caller.
    """

    def __init__(
        self,
        status_code: int,
        headers: dict[str, str],
        response: httpx.Response | None = None,
        chunk_size: int = 64 * 1024,
        byte_range: ByteRange | None = None,
    ) -> None:
        self.status_code = status_code
        self.headers = headers
        self.media_type = PDF_MEDIA_TYPE
        self._response = response
        self._chunk_size = chunk_size
        self._byte_range = byte_range

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        if self._response is None:
            return
        byte_range = self._byte_range
        position = 0
        try:
            async for chunk in self._response.aiter_raw(self._chunk_size):
                if byte_range is None:
                    yield chunk
                    continue

                chunk_start = position
                position += len(chunk)
                if position <= byte_range.start:
                    continue
                yield chunk[
                    max(byte_range.start - chunk_start, 0) : byte_range.end + 1 - chunk_start
                ]
                if position > byte_range.end:
                    break
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._response is not None:
            await self._response.aclose()


def _relay_headers(response: httpx.Response) -> dict[str, str]:
    headers = {"Accept-Ranges": "bytes"}
    for name in _RELAYED_HEADERS:
        value = response.headers.get(name)
        if value is not None:
            headers[name.title()] = value
    return headers


def _content_length(response: httpx.Response) -> int | None:
    value = response.headers.get("content-length", "")
    return int(value) if value.isdigit() else None


class DocumentStreamer:
    """Opens invoice PDF streams on the invoice service."""

    def __init__(self, invoice_client: InvoiceServiceClientProtocol, chunk_size: int) -> None:
        self._invoice_client = invoice_client
        self._chunk_size = chunk_size

    async def open(
        self,
        storage_key: str,
        correlation_id: UUID,
        *,
        range_header: str | None = None,
    ) -> Result[DocumentStream, StreamFailure]:
        """Open the stored PDF, honouring an optional ``Range`` header.

        Returns:
            ``Result.ok(DocumentStream)`` with status 200, 206 or 416, or
            ``Result.err(StreamFailure)`` when the storage authority failed.
            Nothing has been sent to the caller when an error is returned.
        """
        try:
            response = await self._invoice_client.open_pdf_stream(
                storage_key, correlation_id, byte_range=range_header
            )
        except httpx.HTTPError as e:
            logger.error(
                "Invoice service unreachable while opening PDF",
                error_type=type(e).__name__,
                correlation_id=str(correlation_id),
            )
            return Result.err(StreamFailure(reason=type(e).__name__))

        status_code = response.status_code
        if status_code == 416:
            await response.aclose()
            headers = {"Accept-Ranges": "bytes"}
            if "content-range" in response.headers:
                headers["Content-Range"] = response.headers["content-range"]
            return Result.ok(DocumentStream(416, headers))

        if status_code not in (200, 206):
            await response.aclose()
            logger.error(
                "Invoice service returned an error status for PDF",
                status_code=status_code,
                correlation_id=str(correlation_id),
            )
            return Result.err(StreamFailure(reason="error_status", status_code=status_code))

        headers = _relay_headers(response)
        total = _content_length(response)
        if (
            status_code == 200
            and range_header
            and total is not None
            and "content-encoding" not in response.headers
        ):
            try:
                byte_range = parse_byte_range(range_header, total)
            except UnsatisfiableRange as e:
                await response.aclose()
                return Result.ok(
                    DocumentStream(
                        416, {"Accept-Ranges": "bytes", "Content-Range": e.content_range}
                    )
                )
            if byte_range is not None:
                headers["Content-Length"] = str(byte_range.length)
                headers["Content-Range"] = byte_range.content_range(total)
                return Result.ok(
                    DocumentStream(206, headers, response, self._chunk_size, byte_range)
                )

        return Result.ok(DocumentStream(status_code, headers, response, self._chunk_size))
