"""Email service module for InvoiceBox."""

from invoicebox.services.email.base import EmailService, get_email_service
from invoicebox.services.email.console import ConsoleEmailService
from invoicebox.services.email.ses import SESEmailService

__all__ = [
    "EmailService",
    "ConsoleEmailService",
    "SESEmailService",
    "get_email_service",
]
