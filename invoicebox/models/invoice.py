"""Invoice and reminder document models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import BaseModel, Field


class InvoiceStatus(str, Enum):
    """Payment status of an invoice."""

    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class ReminderType(str, Enum):
    """Point in the due-date schedule a reminder was sent for."""

    BEFORE_DUE = "before_due"
    ON_DUE = "on_due"
    AFTER_1 = "after_1"
    AFTER_2 = "after_2"
    AFTER_3 = "after_3"


class InvoiceItem(BaseModel):
    """One billed line of an invoice."""

    description: str
    quantity: float = 1
    price: float = 0.0

    @property
    def amount(self) -> float:
        return self.quantity * self.price


class Invoice(Document):
    """Invoice issued by a vendor to one of their clients."""

    owner_id: Indexed(PydanticObjectId)
    client_id: PydanticObjectId
    invoice_number: str
    items: list[InvoiceItem] = Field(default_factory=list)
    total: float = 0.0
    currency: str = "EUR"
    issue_date: datetime = Field(default_factory=datetime.utcnow)
    due_date: datetime
    status: InvoiceStatus = InvoiceStatus.PENDING
    payment_link: Optional[str] = None
    payment_terms: Optional[str] = None
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "invoices"

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, number={self.invoice_number}, status={self.status.value})>"


class InvoiceReminder(Document):
    """Record of a reminder email sent for an invoice."""

    invoice_id: Indexed(PydanticObjectId)
    type: ReminderType
    status: str = "sent"
    sent_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "invoice_reminders"
