"""Public Invoice Service DTO module.

Contains Data Transfer Objects for the public invoice API and the internal
invoice portal endpoints it consumes.
"""

from services.public_invoice_service.dto.invoice_portal_v1 import (
    PublicActionResponseV1,
    PublicInvoiceResponseV1,
    SubmitSignatureRequestV1,
)

__all__ = ["PublicActionResponseV1", "PublicInvoiceResponseV1", "SubmitSignatureRequestV1"]
