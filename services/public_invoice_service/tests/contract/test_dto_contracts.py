"""
Public Invoice DTO Contract Testing.

Validates the public response DTOs and the internal data service DTOs for
snake_case field names, defaults and tolerance of upstream additions.
"""

from __future__ import annotations

import json
from uuid import uuid4

import pytest
from pydantic import ValidationError

from services.public_invoice_service.dto.invoice_portal_v1 import (
    EnsurePdfResponseV1,
    PublicActionResponseV1,
    PublicInvoiceResponseV1,
    SubmitSignatureRequestV1,
    SubmitSignatureV1,
    ValidateTokenResponseV1,
)


class TestPublicInvoiceResponseV1Contract:
    def test_serialized_field_names_contract(self) -> None:
        """Contract: the invoice page reads exactly these snake_case fields."""
        response = PublicInvoiceResponseV1(invoice_id=uuid4())

        data = json.loads(response.model_dump_json())

        assert set(data) == {
            "invoice_id",
            "invoice_number",
            "date",
            "due_date",
            "signature_path",
            "viewed",
        }
        assert data["viewed"] is False
        assert data["signature_path"] == ""


class TestPublicActionResponseV1Contract:
    def test_success_shape_contract(self) -> None:
        data = PublicActionResponseV1(success=True, message="Invoice marked as viewed").model_dump()

        assert data == {"success": True, "message": "Invoice marked as viewed"}


class TestSubmitSignatureRequestV1Contract:
    def test_signature_path_required_contract(self) -> None:
        with pytest.raises(ValidationError):
            SubmitSignatureRequestV1.model_validate({})

    def test_upstream_body_contract(self) -> None:
        assert SubmitSignatureV1(signature_path="s.png").model_dump() == {
            "signature_path": "s.png"
        }


class TestValidateTokenResponseV1Contract:
    def test_is_valid_required_contract(self) -> None:
        with pytest.raises(ValidationError):
            ValidateTokenResponseV1.model_validate({"invoice_id": str(uuid4())})

    def test_invalid_token_minimal_contract(self) -> None:
        result = ValidateTokenResponseV1.model_validate({"is_valid": False, "error": "Expired"})

        assert result.is_valid is False
        assert result.invoice_id is None
        assert result.viewed is False

    def test_unknown_fields_ignored_contract(self) -> None:
        result = ValidateTokenResponseV1.model_validate(
            {"is_valid": True, "invoice_id": str(uuid4()), "customer_email": "a@b.c"}
        )

        assert not hasattr(result, "customer_email")

    def test_malformed_invoice_id_rejected_contract(self) -> None:
        with pytest.raises(ValidationError):
            ValidateTokenResponseV1.model_validate({"is_valid": True, "invoice_id": "INV-1"})


class TestEnsurePdfResponseV1Contract:
    def test_defaults_contract(self) -> None:
        result = EnsurePdfResponseV1.model_validate({})

        assert result.storage_key is None
        assert result.was_regenerated is False
