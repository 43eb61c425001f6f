"""MongoDB document models for InvoiceBox."""

from invoicebox.models.client import Client
from invoicebox.models.invoice import (
    Invoice,
    InvoiceItem,
    InvoiceReminder,
    InvoiceStatus,
    ReminderType,
)
from invoicebox.models.user import Plan, ReminderSettings, User

__all__ = [
    # Main documents
    "User",
    "Client",
    "Invoice",
    "InvoiceReminder",
    # Embedded subdocuments
    "InvoiceItem",
    "ReminderSettings",
    # Enums
    "Plan",
    "InvoiceStatus",
    "ReminderType",
]
