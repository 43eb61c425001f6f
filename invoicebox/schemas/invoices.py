"""Pydantic schemas for Invoice model."""

from datetime import datetime
from typing import Any

from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from invoicebox.models.invoice import InvoiceItem, InvoiceStatus
from invoicebox.services.invoices import PAYMENT_TERMS_DAYS


class InvoiceCreate(BaseModel):
    """Schema for creating an invoice.

    Give either ``items`` or a single ``amount``. The due date comes from
    ``payment_terms`` ("Net 7", "Net 14", "Net 30") when set, otherwise from
    ``due_date``.
    """

    client_id: str
    invoice_number: str = Field(..., min_length=1, max_length=64)
    items: list[InvoiceItem] | None = None
    amount: float | None = Field(None, ge=0)
    currency: str = Field("EUR", min_length=3, max_length=3)
    issue_date: datetime | None = None
    due_date: datetime | None = None
    payment_terms: str | None = Field(None, max_length=32)
    notes: str | None = None
    payment_link: str | None = Field(None, max_length=2048)

    @model_validator(mode="after")
    def due_date_or_terms(self) -> "InvoiceCreate":
        if self.due_date is None and self.payment_terms not in PAYMENT_TERMS_DAYS:
            raise ValueError("Either due_date or known payment_terms is required")
        return self


class InvoiceStatusUpdate(BaseModel):
    """Schema for changing an invoice's payment status."""

    status: InvoiceStatus

    @field_validator("status", mode="before")
    @classmethod
    def lowercase_status(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class InvoiceResponse(BaseModel):
    """Schema for invoice response."""

    id: str
    client_id: str
    invoice_number: str
    items: list[InvoiceItem] = []
    total: float
    currency: str
    issue_date: datetime
    due_date: datetime
    status: InvoiceStatus
    payment_terms: str | None = None
    notes: str | None = None
    payment_link: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", "client_id", mode="before")
    @classmethod
    def convert_objectid_to_str(cls, v: Any) -> str:
        """Convert ObjectId to string."""
        if isinstance(v, PydanticObjectId):
            return str(v)
        return v
