"""API routers for InvoiceBox."""

from invoicebox.routers import auth, clients, invoices, settings, upload

__all__ = ["auth", "clients", "invoices", "settings", "upload"]
