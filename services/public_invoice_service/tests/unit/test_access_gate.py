"""Unit tests for the invoice access gate."""

from __future__ import annotations

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from dispatch_service_libs.result import Result

from services.public_invoice_service.portal.access_gate import (
    AccessRejection,
    InvoiceAccessGate,
    authorize,
)
from services.public_invoice_service.portal.token_validator import (
    InvalidToken,
    InvoiceSnapshot,
    TokenValidator,
    UpstreamFailure,
    ValidToken,
)

INVOICE_ID = uuid4()
CORRELATION_ID = uuid4()


def _valid(invoice_id=INVOICE_ID) -> ValidToken:
    return ValidToken(
        token="tok",
        snapshot=InvoiceSnapshot(
            invoice_id=invoice_id,
            invoice_number="INV-1",
            invoice_date=None,
            invoice_due_date=None,
            pdf_storage_key="key.pdf",
            signature_path=None,
            viewed=False,
        ),
    )


class TestAuthorize:
    def test_matching_invoice_is_authorized(self) -> None:
        validation = _valid()

        result = authorize(INVOICE_ID, validation)

        assert result.is_ok
        assert result.value.token == "tok"
        assert result.value.snapshot is validation.snapshot

    def test_invalid_token_is_rejected(self) -> None:
        result = authorize(INVOICE_ID, InvalidToken(reason="expired"))

        assert result.is_err
        assert result.error.reason is AccessRejection.INVALID_TOKEN
        assert result.error.detail == "expired"

    def test_other_invoice_is_a_mismatch(self) -> None:
        other = uuid4()

        result = authorize(INVOICE_ID, _valid(invoice_id=other))

        assert result.is_err
        assert result.error.reason is AccessRejection.INVOICE_MISMATCH
        assert result.error.bound_invoice_id == other


class TestInvoiceAccessGate:
    @pytest.mark.asyncio
    async def test_admit_passes_validation_through(self) -> None:
        validator = AsyncMock(spec=TokenValidator)
        validator.validate.return_value = Result.ok(_valid())
        gate = InvoiceAccessGate(validator)

        result = await gate.admit(INVOICE_ID, "tok", CORRELATION_ID)

        assert result.is_ok
        validator.validate.assert_awaited_once_with("tok", CORRELATION_ID)

    @pytest.mark.asyncio
    async def test_admit_reports_upstream_unavailable(self) -> None:
        failure = UpstreamFailure(service="data_service", operation="validate_token", reason="x")
        validator = AsyncMock(spec=TokenValidator)
        validator.validate.return_value = Result.err(failure)
        gate = InvoiceAccessGate(validator)

        result = await gate.admit(INVOICE_ID, "tok", CORRELATION_ID)

        assert result.is_err
        assert result.error.reason is AccessRejection.UPSTREAM_UNAVAILABLE
        assert result.error.upstream is failure
