"""Pydantic schemas for InvoiceBox API."""

from invoicebox.schemas.clients import ClientCreate, ClientResponse, ClientUpdate
from invoicebox.schemas.invoices import InvoiceCreate, InvoiceResponse, InvoiceStatusUpdate
from invoicebox.schemas.settings import SettingsResponse, SettingsUpdate
from invoicebox.schemas.upload import ImportDebug, ImportDetails, ImportResponse, LogoUploadResponse

__all__ = [
    "ClientCreate",
    "ClientResponse",
    "ClientUpdate",
    "ImportDebug",
    "ImportDetails",
    "ImportResponse",
    "InvoiceCreate",
    "InvoiceResponse",
    "InvoiceStatusUpdate",
    "LogoUploadResponse",
    "SettingsResponse",
    "SettingsUpdate",
]
