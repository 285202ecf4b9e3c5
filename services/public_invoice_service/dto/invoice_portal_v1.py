"""Invoice portal v1 DTOs.

Public models are what anonymous callers see; internal models deserialize
responses from the data service (token/invoice authority). All field names
are snake_case on the wire.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PublicInvoiceResponseV1(BaseModel):
    """Invoice metadata shown on the public invoice page."""

    invoice_id: UUID
    invoice_number: str = ""
    date: str = Field(default="", description="Long-form invoice date, empty when unknown")
    due_date: str = Field(default="", description="Long-form due date or 'On receipt'")
    signature_path: str = ""
    viewed: bool = False


class PublicActionResponseV1(BaseModel):
    """Successful outcome of a public action (viewed, signature).

    Failures are not reported through this model; they use the shared error
    envelope ``{"success": false, "error": {"code", "message", "correlation_id"}}``.
    """

    success: bool
    message: str | None = None


class SubmitSignatureRequestV1(BaseModel):
    """Body of the public signature submission.

    Length and emptiness are checked by the action relay so the limit stays
    configurable and the check runs before any upstream call.
    """

    signature_path: str


# --- Internal response models for data service deserialization ---


class ValidateTokenResponseV1(BaseModel):
    """Response of GET {portal}/validate?token=...

    ``is_valid`` is required: a success response without it is malformed.
    """

    model_config = ConfigDict(extra="ignore")

    is_valid: bool
    error: str | None = None
    invoice_id: UUID | None = None
    pdf_storage_key: str | None = None
    invoice_number: str | None = None
    invoice_date: datetime | None = None
    invoice_due_date: datetime | None = None
    signature_path: str | None = None
    viewed: bool = False


class EnsurePdfResponseV1(BaseModel):
    """Response of GET {portal}/ensure-pdf?token=..."""

    model_config = ConfigDict(extra="ignore")

    storage_key: str | None = None
    was_regenerated: bool = False


class SubmitSignatureV1(BaseModel):
    """Body of POST {portal}/signature?token=..."""

    signature_path: str
