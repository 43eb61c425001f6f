"""Invoice endpoints."""

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from invoicebox.models.invoice import InvoiceStatus
from invoicebox.routers.clients import parse_object_id
from invoicebox.schemas.invoices import InvoiceCreate, InvoiceResponse, InvoiceStatusUpdate
from invoicebox.services.auth import RequireAuth
from invoicebox.services.import_service import ClientRepository, get_client_repository
from invoicebox.services.invoices import (
    InvoiceRepository,
    build_items,
    compute_due_date,
    get_invoice_repository,
    invoice_total,
)
from invoicebox.services.plans import PlanFeatureError, check_invoice_quota

logger = logging.getLogger(__name__)

router = APIRouter()

Invoices = Annotated[InvoiceRepository, Depends(get_invoice_repository)]
Clients = Annotated[ClientRepository, Depends(get_client_repository)]


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    current_user: RequireAuth,
    invoices: Invoices,
    status_filter: Annotated[InvoiceStatus | None, Query(alias="status")] = None,
) -> list[InvoiceResponse]:
    """List the current user's invoices, newest first."""
    found = await invoices.list_for_owner(current_user.id, status_filter)
    return [InvoiceResponse.model_validate(i) for i in found]


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_data: InvoiceCreate,
    current_user: RequireAuth,
    invoices: Invoices,
    clients: Clients,
) -> InvoiceResponse:
    """Issue an invoice to one of the current user's clients.

    FREE accounts are limited to three invoices.
    """
    try:
        check_invoice_quota(current_user.plan, await invoices.count(current_user.id))
    except PlanFeatureError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)

    not_found = HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    client_id = parse_object_id(invoice_data.client_id, not_found)
    if await clients.get(current_user.id, client_id) is None:
        raise not_found

    issue_date = invoice_data.issue_date or datetime.now(timezone.utc)
    items = build_items(invoice_data.items, invoice_data.amount)

    invoice = await invoices.create(
        current_user.id,
        {
            "client_id": client_id,
            "invoice_number": invoice_data.invoice_number,
            "items": items,
            "total": invoice_total(items),
            "currency": invoice_data.currency.upper(),
            "issue_date": issue_date,
            "due_date": compute_due_date(
                issue_date, invoice_data.due_date, invoice_data.payment_terms
            ),
            "payment_terms": invoice_data.payment_terms,
            "notes": invoice_data.notes,
            "payment_link": invoice_data.payment_link,
        },
    )
    logger.info("Created invoice %s for owner %s", invoice_data.invoice_number, current_user.id)
    return InvoiceResponse.model_validate(invoice)


@router.put("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice_status(
    invoice_id: str,
    update: InvoiceStatusUpdate,
    current_user: RequireAuth,
    invoices: Invoices,
) -> InvoiceResponse:
    """Mark an invoice paid, cancelled or pending again.

    Only pending invoices receive payment reminders.
    """
    not_found = HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    oid = parse_object_id(invoice_id, not_found)
    invoice = await invoices.set_status(current_user.id, oid, update.status)
    if invoice is None:
        raise not_found
    logger.info("Invoice %s is now %s", invoice.invoice_number, update.status.value)
    return InvoiceResponse.model_validate(invoice)
