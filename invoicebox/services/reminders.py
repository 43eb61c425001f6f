"""Daily payment reminder job.

Once a day every pending invoice is checked against its vendor's reminder
schedule. At most one reminder of each type is ever sent per invoice.
Invoices are handled one after another; a slow email backend only makes the
run take longer.
"""

import asyncio
import logging
from datetime import date, datetime, timedelta

from beanie import PydanticObjectId

from invoicebox.models.client import Client
from invoicebox.models.invoice import Invoice, InvoiceReminder, InvoiceStatus, ReminderType
from invoicebox.models.user import Plan, ReminderSettings, User
from invoicebox.services.email import EmailService, get_email_service
from invoicebox.services.plans import allowed_reminder_types, normalize_plan

logger = logging.getLogger(__name__)


def days_overdue(due_date: datetime | date, today: date) -> int:
    """Days elapsed since the due date; negative before it, 0 on the day."""
    if isinstance(due_date, datetime):
        due_date = due_date.date()
    return (today - due_date).days


def reminder_type_for(
    plan: Plan | str | None,
    reminder_settings: ReminderSettings | None,
    overdue: int,
) -> ReminderType | None:
    """Pick the reminder due today for an invoice, if any.

    PRO accounts get before-due, on-due and three after-due reminders;
    STARTER accounts only the first after-due reminder; FREE accounts send
    reminders by hand. Later checks take precedence over earlier ones.

    Args:
        plan: The vendor's plan.
        reminder_settings: The vendor's schedule, None disables reminders.
        overdue: Result of ``days_overdue`` for the invoice.

    Returns:
        The reminder type to send, or None.
    """
    plan = normalize_plan(plan)
    if reminder_settings is None or plan == Plan.FREE:
        return None

    reminder: ReminderType | None = None

    if plan == Plan.PRO:
        if reminder_settings.days_before and overdue == -reminder_settings.days_before:
            reminder = ReminderType.BEFORE_DUE
        elif reminder_settings.on_due_date and overdue == 0:
            reminder = ReminderType.ON_DUE

    if reminder_settings.days_after_1 and overdue == reminder_settings.days_after_1:
        reminder = ReminderType.AFTER_1

    if plan == Plan.PRO:
        if reminder_settings.days_after_2 and overdue == reminder_settings.days_after_2:
            reminder = ReminderType.AFTER_2
        elif reminder_settings.days_after_3 and overdue == reminder_settings.days_after_3:
            reminder = ReminderType.AFTER_3

    if reminder not in allowed_reminder_types(plan):
        return None
    return reminder


def seconds_until_next_run(now: datetime, run_hour: int) -> float:
    """Seconds from ``now`` until the next ``run_hour``:00."""
    target = now.replace(hour=run_hour, minute=0, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class ReminderJob:
    """Sends due payment reminders for all pending invoices."""

    def __init__(self, email_service: EmailService | None = None, run_hour: int = 9) -> None:
        self._email_service = email_service
        self.run_hour = run_hour

    @property
    def email_service(self) -> EmailService:
        if self._email_service is None:
            self._email_service = get_email_service()
        return self._email_service

    async def load_pending(self) -> list[Invoice]:
        return await Invoice.find(Invoice.status == InvoiceStatus.PENDING).to_list()

    async def load_owner(self, owner_id: PydanticObjectId) -> User | None:
        return await User.get(owner_id)

    async def load_client(self, client_id: PydanticObjectId) -> Client | None:
        return await Client.get(client_id)

    async def already_sent(self, invoice_id: PydanticObjectId, reminder: ReminderType) -> bool:
        existing = await InvoiceReminder.find_one(
            InvoiceReminder.invoice_id == invoice_id,
            InvoiceReminder.type == reminder,
        )
        return existing is not None

    async def record_sent(self, invoice_id: PydanticObjectId, reminder: ReminderType) -> None:
        await InvoiceReminder(invoice_id=invoice_id, type=reminder).insert()

    async def run_once(self, today: date | None = None) -> int:
        """Process every pending invoice once.

        Args:
            today: Date to evaluate schedules against, defaults to today.

        Returns:
            Number of reminders sent.
        """
        today = today or date.today()
        invoices = await self.load_pending()
        logger.info("Processing %d pending invoices for reminders", len(invoices))

        owners: dict[PydanticObjectId, User | None] = {}
        sent = 0

        for invoice in invoices:
            if invoice.owner_id not in owners:
                owners[invoice.owner_id] = await self.load_owner(invoice.owner_id)
            owner = owners[invoice.owner_id]
            if owner is None:
                continue

            reminder = reminder_type_for(
                owner.plan,
                owner.reminder_settings,
                days_overdue(invoice.due_date, today),
            )
            if reminder is None:
                continue

            if await self.already_sent(invoice.id, reminder):
                continue

            client = await self.load_client(invoice.client_id)
            if client is None or not client.email:
                logger.warning(
                    "Skipping %s reminder for invoice %s: client has no email",
                    reminder.value,
                    invoice.invoice_number,
                )
                continue

            logger.info(
                "Sending %s reminder for invoice %s (vendor: %s)",
                reminder.value,
                invoice.invoice_number,
                owner.company_name or owner.email,
            )
            delivered = await self.email_service.send_invoice_reminder(
                client.email,
                invoice,
                reminder,
                vendor_name=owner.company_name,
            )
            if not delivered:
                logger.warning(
                    "Reminder for invoice %s was not delivered", invoice.invoice_number
                )
                continue

            await self.record_sent(invoice.id, reminder)
            sent += 1

        return sent

    async def run_forever(self) -> None:
        """Run once a day at ``run_hour`` until cancelled.

        Errors are logged and the job waits for the next day.
        """
        while True:
            delay = seconds_until_next_run(datetime.now(), self.run_hour)
            logger.debug("Next reminder run in %.0f seconds", delay)
            await asyncio.sleep(delay)
            try:
                sent = await self.run_once()
                logger.info("Reminder run finished: %d reminders sent", sent)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Error in reminder job")
