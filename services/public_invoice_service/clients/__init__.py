"""HTTP clients for the upstream Dispatch services."""

from services.public_invoice_service.clients.data_service_client import DataServiceClientImpl
from services.public_invoice_service.clients.invoice_service_client import (
    InvoiceServiceClientImpl,
)

__all__ = ["DataServiceClientImpl", "InvoiceServiceClientImpl"]
