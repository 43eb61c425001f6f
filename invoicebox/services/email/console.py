"""Console email service for development and testing."""

import logging
from typing import TYPE_CHECKING

from invoicebox.services.email.base import EmailService

if TYPE_CHECKING:
    from invoicebox.config import Settings

logger = logging.getLogger(__name__)


class ConsoleEmailService(EmailService):
    """Email service that logs emails instead of sending them."""

    def __init__(self, settings: "Settings") -> None:
        super().__init__(settings)
        logger.info("Using console email backend (emails will be logged, not sent)")

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
        sender_name: str | None = None,
    ) -> bool:
        """Log an email instead of sending it. Always returns True."""
        separator = "=" * 60
        logger.info(
            "\n%s\nEMAIL (console backend - not actually sent)\nFrom: %s\nTo: %s\nSubject: %s\n%s\n%s\n%s",
            separator,
            self._format_sender(sender_name),
            to_email,
            subject,
            separator,
            text_content or "(no text content)",
            separator,
        )
        return True
