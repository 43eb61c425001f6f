"""Invoice persistence and the arithmetic behind creating one."""

from datetime import datetime, timedelta
from typing import Any, Protocol

from beanie import PydanticObjectId

from invoicebox.models.invoice import Invoice, InvoiceItem, InvoiceStatus

# Payment terms accepted in place of an explicit due date
PAYMENT_TERMS_DAYS: dict[str, int] = {
    "Net 7": 7,
    "Net 14": 14,
    "Net 30": 30,
}


def compute_due_date(
    issue_date: datetime,
    due_date: datetime | None,
    payment_terms: str | None,
) -> datetime | None:
    """Work out an invoice's due date.

    Known payment terms win over an explicit due date.
    """
    days = PAYMENT_TERMS_DAYS.get(payment_terms or "")
    if days is not None:
        return issue_date + timedelta(days=days)
    return due_date


def build_items(items: list[InvoiceItem] | None, amount: float | None) -> list[InvoiceItem]:
    """Return the invoice lines, turning a bare amount into a single line."""
    if items:
        return list(items)
    if amount:
        return [InvoiceItem(description="Services", quantity=1, price=amount)]
    return []


def invoice_total(items: list[InvoiceItem]) -> float:
    return sum(item.amount for item in items)


class InvoiceRepository(Protocol):
    """Storage operations on an owner's invoices."""

    async def count(self, owner_id: PydanticObjectId) -> int:
        ...

    async def list_for_owner(
        self, owner_id: PydanticObjectId, status: InvoiceStatus | None = None
    ) -> list[Any]:
        """Return the owner's invoices, newest first."""
        ...

    async def create(self, owner_id: PydanticObjectId, data: dict[str, Any]) -> Any:
        ...

    async def set_status(
        self, owner_id: PydanticObjectId, invoice_id: PydanticObjectId, status: InvoiceStatus
    ) -> Any | None:
        """Change an invoice's status. Returns None if the owner has no such invoice."""
        ...


class BeanieInvoiceRepository:
    """InvoiceRepository backed by the ``invoices`` MongoDB collection."""

    async def count(self, owner_id: PydanticObjectId) -> int:
        return await Invoice.find(Invoice.owner_id == owner_id).count()

    async def list_for_owner(
        self, owner_id: PydanticObjectId, status: InvoiceStatus | None = None
    ) -> list[Invoice]:
        query = Invoice.find(Invoice.owner_id == owner_id)
        if status is not None:
            query = query.find(Invoice.status == status)
        return await query.sort(-Invoice.created_at).to_list()

    async def create(self, owner_id: PydanticObjectId, data: dict[str, Any]) -> Invoice:
        invoice = Invoice(owner_id=owner_id, **data)
        await invoice.insert()
        return invoice

    async def set_status(
        self, owner_id: PydanticObjectId, invoice_id: PydanticObjectId, status: InvoiceStatus
    ) -> Invoice | None:
        invoice = await Invoice.find_one(Invoice.id == invoice_id, Invoice.owner_id == owner_id)
        if invoice is None:
            return None
        invoice.status = status
        await invoice.save()
        return invoice


def get_invoice_repository() -> InvoiceRepository:
    """FastAPI dependency returning the default repository."""
    return BeanieInvoiceRepository()
