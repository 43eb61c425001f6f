"""Services for InvoiceBox application."""

from invoicebox.services.import_service import ClientImporter
from invoicebox.services.logo_storage import LogoStorageService
from invoicebox.services.reminders import ReminderJob

__all__ = ["ClientImporter", "LogoStorageService", "ReminderJob"]
