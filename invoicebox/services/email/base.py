"""Base email service and factory."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader

from invoicebox.models.invoice import ReminderType

if TYPE_CHECKING:
    from invoicebox.config import Settings
    from invoicebox.models.invoice import Invoice

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

REMINDER_SUBJECTS: dict[ReminderType, str] = {
    ReminderType.BEFORE_DUE: "Upcoming payment: invoice {number}",
    ReminderType.ON_DUE: "Payment due today: invoice {number}",
    ReminderType.AFTER_1: "Payment overdue: invoice {number}",
    ReminderType.AFTER_2: "Second reminder: invoice {number} is overdue",
    ReminderType.AFTER_3: "Final reminder: invoice {number} is overdue",
}


class EmailService(ABC):
    """Abstract base class for email services."""

    def __init__(self, settings: "Settings") -> None:
        self.settings = settings
        self.sender = settings.email_sender
        self.sender_name = settings.email_sender_name
        self.frontend_url = settings.frontend_url

        self.template_env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=True,
        )

    def _render_template(self, template_name: str, **context: object) -> str:
        """Render a Jinja2 template from the templates directory."""
        template = self.template_env.get_template(template_name)
        return template.render(**context)

    def _format_sender(self, display_name: str | None = None) -> str:
        """Format the sender, e.g. "Acme SRL <billing@invoicebox.app>"."""
        return f"{display_name or self.sender_name} <{self.sender}>"

    @abstractmethod
    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
        sender_name: str | None = None,
    ) -> bool:
        """Send an email.

        Args:
            to_email: Recipient email address.
            subject: Email subject.
            html_content: HTML email body.
            text_content: Plain text email body (optional).
            sender_name: Display name to send as, defaults to the app's.

        Returns:
            True if email was sent successfully, False otherwise.
        """
        pass

    async def send_invoice_reminder(
        self,
        to_email: str,
        invoice: "Invoice",
        reminder_type: ReminderType,
        vendor_name: str | None = None,
    ) -> bool:
        """Send a payment reminder for an invoice.

        Args:
            to_email: The client's email address.
            invoice: The pending invoice.
            reminder_type: Point in the schedule this reminder is for.
            vendor_name: The issuing vendor's company name.

        Returns:
            True if email was sent successfully, False otherwise.
        """
        vendor = vendor_name or self.sender_name
        portal_url = f"{self.frontend_url}/invoice/{invoice.id}"
        due_date = invoice.due_date.strftime("%Y-%m-%d")
        amount = f"{invoice.total:.2f} {invoice.currency}"

        html_content = self._render_template(
            "invoice_reminder.html",
            vendor_name=vendor,
            invoice_number=invoice.invoice_number,
            amount=amount,
            due_date=due_date,
            reminder_type=reminder_type.value,
            payment_link=invoice.payment_link,
            portal_url=portal_url,
        )

        text_content = f"""
Hello,

This is a reminder from {vendor} about invoice {invoice.invoice_number}
for {amount}, due on {due_date}.

View the invoice: {portal_url}
"""
        if invoice.payment_link:
            text_content += f"Pay online: {invoice.payment_link}\n"

        subject = REMINDER_SUBJECTS[reminder_type].format(number=invoice.invoice_number)
        return await self.send_email(
            to_email=to_email,
            subject=subject,
            html_content=html_content,
            text_content=text_content.strip(),
            sender_name=vendor,
        )


def get_email_service() -> EmailService:
    """Get the configured email service instance."""
    from invoicebox.config import settings

    if settings.email_backend == "ses":
        from invoicebox.services.email.ses import SESEmailService

        return SESEmailService(settings)
    else:
        from invoicebox.services.email.console import ConsoleEmailService

        return ConsoleEmailService(settings)
