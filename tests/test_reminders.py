"""Tests for the daily payment reminder job."""

from datetime import date, datetime
from types import SimpleNamespace

import pytest
from beanie import PydanticObjectId

from invoicebox.models.invoice import ReminderType
from invoicebox.models.user import Plan, ReminderSettings
from invoicebox.services.reminders import (
    ReminderJob,
    days_overdue,
    reminder_type_for,
    seconds_until_next_run,
)

TODAY = date(2026, 3, 10)


@pytest.fixture
def schedule() -> ReminderSettings:
    return ReminderSettings(
        days_before=3,
        on_due_date=True,
        days_after_1=1,
        days_after_2=7,
        days_after_3=14,
    )


# =============================================================================
# Schedule evaluation
# =============================================================================


def test_days_overdue() -> None:
    assert days_overdue(date(2026, 3, 7), TODAY) == 3
    assert days_overdue(datetime(2026, 3, 10, 23, 59), TODAY) == 0
    assert days_overdue(date(2026, 3, 13), TODAY) == -3


@pytest.mark.parametrize(
    "overdue,expected",
    [
        (-3, ReminderType.BEFORE_DUE),
        (0, ReminderType.ON_DUE),
        (1, ReminderType.AFTER_1),
        (7, ReminderType.AFTER_2),
        (14, ReminderType.AFTER_3),
        (5, None),
        (-1, None),
    ],
)
def test_pro_schedule(schedule, overdue, expected) -> None:
    assert reminder_type_for(Plan.PRO, schedule, overdue) == expected


@pytest.mark.parametrize("overdue", [-3, 0, 7, 14])
def test_starter_only_gets_first_overdue_reminder(schedule, overdue) -> None:
    assert reminder_type_for(Plan.STARTER, schedule, overdue) is None


def test_starter_first_overdue_reminder(schedule) -> None:
    assert reminder_type_for(Plan.STARTER, schedule, 1) == ReminderType.AFTER_1


def test_free_plan_never_sends(schedule) -> None:
    for overdue in (-3, 0, 1, 7, 14):
        assert reminder_type_for(Plan.FREE, schedule, overdue) is None


def test_no_schedule_never_sends() -> None:
    assert reminder_type_for(Plan.PRO, None, 1) is None


def test_disabled_offsets_are_ignored() -> None:
    settings = ReminderSettings(days_before=0, on_due_date=False, days_after_1=None)
    assert reminder_type_for(Plan.PRO, settings, 0) is None
    assert reminder_type_for(Plan.PRO, settings, 1) is None


def test_seconds_until_next_run() -> None:
    assert seconds_until_next_run(datetime(2026, 3, 10, 8, 0), 9) == 3600
    assert seconds_until_next_run(datetime(2026, 3, 10, 9, 0), 9) == 86400
    assert seconds_until_next_run(datetime(2026, 3, 10, 23, 30), 9) == 9.5 * 3600


# =============================================================================
# Job run
# =============================================================================


class RecordingEmailService:
    def __init__(self, delivered: bool = True) -> None:
        self.delivered = delivered
        self.sent: list[tuple] = []

    async def send_invoice_reminder(self, to_email, invoice, reminder_type, vendor_name=None):
        self.sent.append((to_email, invoice.invoice_number, reminder_type, vendor_name))
        return self.delivered


class InMemoryReminderJob(ReminderJob):
    """ReminderJob reading from plain objects instead of MongoDB."""

    def __init__(self, invoices, owners, clients, email_service) -> None:
        super().__init__(email_service=email_service)
        self.invoices = invoices
        self.owners = owners
        self.clients = clients
        self.sent: set[tuple] = set()
        self.owner_lookups = 0

    async def load_pending(self):
        return self.invoices

    async def load_owner(self, owner_id):
        self.owner_lookups += 1
        return self.owners.get(owner_id)

    async def load_client(self, client_id):
        return self.clients.get(client_id)

    async def already_sent(self, invoice_id, reminder):
        return (invoice_id, reminder) in self.sent

    async def record_sent(self, invoice_id, reminder):
        self.sent.add((invoice_id, reminder))


def _owner(plan: Plan, schedule) -> SimpleNamespace:
    return SimpleNamespace(
        id=PydanticObjectId(),
        email="vendor@example.com",
        company_name="Vendor SRL",
        plan=plan,
        reminder_settings=schedule,
    )


def _invoice(owner, client, due: date, number: str = "INV-001") -> SimpleNamespace:
    return SimpleNamespace(
        id=PydanticObjectId(),
        owner_id=owner.id,
        client_id=client.id,
        invoice_number=number,
        due_date=datetime(due.year, due.month, due.day),
    )


def _client(email: str | None = "billing@acme.ro") -> SimpleNamespace:
    return SimpleNamespace(id=PydanticObjectId(), email=email)


def _job(invoices, owners, clients, email_service) -> InMemoryReminderJob:
    return InMemoryReminderJob(
        invoices,
        {o.id: o for o in owners},
        {c.id: c for c in clients},
        email_service,
    )


@pytest.mark.asyncio
async def test_run_sends_due_reminder(schedule) -> None:
    owner = _owner(Plan.PRO, schedule)
    client = _client()
    invoice = _invoice(owner, client, date(2026, 3, 9))
    email = RecordingEmailService()
    job = _job([invoice], [owner], [client], email)

    assert await job.run_once(today=TODAY) == 1
    assert email.sent == [("billing@acme.ro", "INV-001", ReminderType.AFTER_1, "Vendor SRL")]
    assert (invoice.id, ReminderType.AFTER_1) in job.sent


@pytest.mark.asyncio
async def test_run_is_idempotent(schedule) -> None:
    owner = _owner(Plan.PRO, schedule)
    client = _client()
    invoice = _invoice(owner, client, date(2026, 3, 10))
    email = RecordingEmailService()
    job = _job([invoice], [owner], [client], email)

    assert await job.run_once(today=TODAY) == 1
    assert await job.run_once(today=TODAY) == 0
    assert len(email.sent) == 1


@pytest.mark.asyncio
async def test_undelivered_reminder_is_not_recorded(schedule) -> None:
    owner = _owner(Plan.PRO, schedule)
    client = _client()
    invoice = _invoice(owner, client, date(2026, 3, 9))
    job = _job([invoice], [owner], [client], RecordingEmailService(delivered=False))

    assert await job.run_once(today=TODAY) == 0
    assert job.sent == set()


@pytest.mark.asyncio
async def test_client_without_email_is_skipped(schedule) -> None:
    owner = _owner(Plan.PRO, schedule)
    client = _client(email=None)
    invoice = _invoice(owner, client, date(2026, 3, 9))
    email = RecordingEmailService()
    job = _job([invoice], [owner], [client], email)

    assert await job.run_once(today=TODAY) == 0
    assert email.sent == []


@pytest.mark.asyncio
async def test_missing_owner_is_skipped(schedule) -> None:
    owner = _owner(Plan.PRO, schedule)
    client = _client()
    invoice = _invoice(owner, client, date(2026, 3, 9))
    email = RecordingEmailService()
    job = _job([invoice], [], [client], email)

    assert await job.run_once(today=TODAY) == 0
    assert email.sent == []


@pytest.mark.asyncio
async def test_owner_is_loaded_once_per_run(schedule) -> None:
    owner = _owner(Plan.STARTER, schedule)
    client = _client()
    invoices = [
        _invoice(owner, client, date(2026, 3, 9), "INV-001"),
        _invoice(owner, client, date(2026, 3, 9), "INV-002"),
        _invoice(owner, client, date(2026, 3, 3), "INV-003"),
    ]
    email = RecordingEmailService()
    job = _job(invoices, [owner], [client], email)

    assert await job.run_once(today=TODAY) == 2
    assert job.owner_lookups == 1
    assert [s[1] for s in email.sent] == ["INV-001", "INV-002"]
