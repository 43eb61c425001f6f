"""Pytest configuration and fixtures for InvoiceBox tests.

HTTP tests run against the routers with the client repository and the
authenticated user overridden, so no MongoDB server is needed.
"""

import os
import tempfile
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

# Point storage at a scratch directory before any settings are loaded
_DATA_DIR = Path(tempfile.mkdtemp(prefix="invoicebox-test-"))
os.environ.setdefault("INVOICEBOX_STORAGE_DATA_DIR", str(_DATA_DIR))
os.environ.setdefault("INVOICEBOX_STORAGE_LOG_DIR", str(_DATA_DIR / "logs"))
os.environ.setdefault("INVOICEBOX_REMINDERS_ENABLED", "false")
os.environ.setdefault("INVOICEBOX_EMAIL_BACKEND", "console")
os.environ.setdefault("INVOICEBOX_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")

import io

import pytest
import pytest_asyncio
from beanie import PydanticObjectId
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook
from pydantic import BaseModel, Field

from invoicebox.models.invoice import InvoiceItem, InvoiceStatus
from invoicebox.models.user import Plan, ReminderSettings
from invoicebox.services.auth import require_auth
from invoicebox.services.import_service import ResolvedClient, get_client_repository
from invoicebox.services.invoices import get_invoice_repository


class StoredClient(ResolvedClient):
    """In-memory stand-in for a persisted Client document."""

    id: PydanticObjectId = Field(default_factory=PydanticObjectId)
    owner_id: PydanticObjectId
    created_at: datetime = Field(default_factory=datetime.utcnow)


class InMemoryClientRepository:
    """ClientRepository keeping clients in a list."""

    def __init__(self) -> None:
        self.clients: list[StoredClient] = []
        self.insert_calls = 0
        self.count_calls = 0

    def seed(self, owner_id: PydanticObjectId, count: int) -> None:
        for i in range(count):
            self.clients.append(StoredClient(owner_id=owner_id, name=f"Existing {i}"))

    def for_owner(self, owner_id: PydanticObjectId) -> list[StoredClient]:
        return [c for c in self.clients if c.owner_id == owner_id]

    async def count(self, owner_id: PydanticObjectId) -> int:
        self.count_calls += 1
        return len(self.for_owner(owner_id))

    async def insert_many(self, owner_id: PydanticObjectId, records: list[ResolvedClient]) -> None:
        self.insert_calls += 1
        for record in records:
            self.clients.append(StoredClient(owner_id=owner_id, **record.model_dump()))

    async def list_for_owner(self, owner_id: PydanticObjectId) -> list[StoredClient]:
        return list(reversed(self.for_owner(owner_id)))

    async def create(self, owner_id: PydanticObjectId, record: ResolvedClient) -> StoredClient:
        client = StoredClient(owner_id=owner_id, **record.model_dump())
        self.clients.append(client)
        return client

    async def get(self, owner_id: PydanticObjectId, client_id: PydanticObjectId) -> StoredClient | None:
        for client in self.for_owner(owner_id):
            if client.id == client_id:
                return client
        return None

    async def update(
        self, owner_id: PydanticObjectId, client_id: PydanticObjectId, changes: dict
    ) -> StoredClient | None:
        client = await self.get(owner_id, client_id)
        if client is None:
            return None
        for name, value in changes.items():
            setattr(client, name, value)
        return client

    async def delete(self, owner_id: PydanticObjectId, client_id: PydanticObjectId) -> bool:
        client = await self.get(owner_id, client_id)
        if client is None:
            return False
        self.clients.remove(client)
        return True


class StoredInvoice(BaseModel):
    """In-memory stand-in for a persisted Invoice document."""

    id: PydanticObjectId = Field(default_factory=PydanticObjectId)
    owner_id: PydanticObjectId
    client_id: PydanticObjectId
    invoice_number: str
    items: list[InvoiceItem] = Field(default_factory=list)
    total: float = 0.0
    currency: str = "EUR"
    issue_date: datetime
    due_date: datetime
    status: InvoiceStatus = InvoiceStatus.PENDING
    payment_terms: str | None = None
    notes: str | None = None
    payment_link: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class InMemoryInvoiceRepository:
    """InvoiceRepository keeping invoices in a list."""

    def __init__(self) -> None:
        self.invoices: list[StoredInvoice] = []

    def seed(self, owner_id: PydanticObjectId, count: int) -> None:
        for i in range(count):
            self.invoices.append(StoredInvoice(
                owner_id=owner_id,
                client_id=PydanticObjectId(),
                invoice_number=f"INV-{i:03d}",
                issue_date=datetime(2026, 1, 1),
                due_date=datetime(2026, 1, 31),
            ))

    def for_owner(self, owner_id: PydanticObjectId) -> list[StoredInvoice]:
        return [i for i in self.invoices if i.owner_id == owner_id]

    async def count(self, owner_id: PydanticObjectId) -> int:
        return len(self.for_owner(owner_id))

    async def list_for_owner(
        self, owner_id: PydanticObjectId, status: InvoiceStatus | None = None
    ) -> list[StoredInvoice]:
        found = [i for i in self.for_owner(owner_id) if status is None or i.status == status]
        return list(reversed(found))

    async def create(self, owner_id: PydanticObjectId, data: dict) -> StoredInvoice:
        invoice = StoredInvoice(owner_id=owner_id, **data)
        self.invoices.append(invoice)
        return invoice

    async def set_status(
        self, owner_id: PydanticObjectId, invoice_id: PydanticObjectId, status: InvoiceStatus
    ) -> StoredInvoice | None:
        for invoice in self.for_owner(owner_id):
            if invoice.id == invoice_id:
                invoice.status = status
                return invoice
        return None


class FakeUser:
    """Authenticated vendor without a database behind it."""

    def __init__(self, plan: Plan = Plan.FREE) -> None:
        self.id = PydanticObjectId()
        self.email = "vendor@example.com"
        self.full_name = "Vera Vendor"
        self.company_name = "Vendor SRL"
        self.plan = plan
        self.logo_url: str | None = None
        self.reminder_settings: ReminderSettings | None = None
        self.is_active = True
        self.created_at = datetime(2026, 1, 1)
        self.updated_at = datetime(2026, 1, 1)
        self.last_login: datetime | None = None
        self.save_calls = 0

    async def save(self) -> None:
        self.save_calls += 1


def create_test_app():
    """Create a FastAPI app configured for testing (no database lifespan).

    Routers are included rather than copied from the main app so that
    ``dependency_overrides`` set on this app apply to them.
    """
    from fastapi import FastAPI

    from invoicebox import __version__
    from invoicebox.main import health_check, limiter
    from invoicebox.routers import auth, clients, invoices, settings, upload

    @asynccontextmanager
    async def test_lifespan(app: FastAPI):
        yield

    test_app = FastAPI(
        title="InvoiceBox Test",
        version=__version__,
        lifespan=test_lifespan,
    )
    test_app.state.limiter = limiter

    test_app.add_api_route("/health", health_check, methods=["GET"])
    test_app.include_router(auth.router, prefix="/api/auth")
    test_app.include_router(clients.router, prefix="/api/clients")
    test_app.include_router(invoices.router, prefix="/api/invoices")
    test_app.include_router(settings.router, prefix="/api/settings")
    test_app.include_router(upload.router, prefix="/api/upload")

    return test_app


_test_app = None


def get_test_app():
    """Get the test app singleton."""
    global _test_app
    if _test_app is None:
        _test_app = create_test_app()
    return _test_app


@pytest.fixture
def repository() -> InMemoryClientRepository:
    return InMemoryClientRepository()


@pytest.fixture
def invoice_repository() -> InMemoryInvoiceRepository:
    return InMemoryInvoiceRepository()


@pytest.fixture
def user() -> FakeUser:
    return FakeUser()


@pytest_asyncio.fixture(scope="function")
async def client(user, repository, invoice_repository) -> AsyncGenerator[AsyncClient, None]:
    """Async test client authenticated as ``user`` and backed by in-memory repositories."""
    app = get_test_app()
    app.dependency_overrides[require_auth] = lambda: user
    app.dependency_overrides[get_client_repository] = lambda: repository
    app.dependency_overrides[get_invoice_repository] = lambda: invoice_repository

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def anonymous_client() -> AsyncGenerator[AsyncClient, None]:
    """Async test client without credentials."""
    app = get_test_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def make_xlsx(rows: list[list]) -> bytes:
    """Build an XLSX workbook whose first sheet holds ``rows``."""
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def sample_png_bytes() -> bytes:
    """A minimal valid 1x1 PNG."""
    return bytes([
        0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A,  # PNG signature
        0x00, 0x00, 0x00, 0x0D,  # IHDR length
        0x49, 0x48, 0x44, 0x52,  # IHDR
        0x00, 0x00, 0x00, 0x01,  # width: 1
        0x00, 0x00, 0x00, 0x01,  # height: 1
        0x08, 0x02,  # bit depth: 8, color type: RGB
        0x00, 0x00, 0x00,  # compression, filter, interlace
        0x90, 0x77, 0x53, 0xDE,  # CRC
        0x00, 0x00, 0x00, 0x0C,  # IDAT length
        0x49, 0x44, 0x41, 0x54,  # IDAT
        0x08, 0xD7, 0x63, 0xF8, 0xFF, 0xFF, 0x3F, 0x00,  # compressed data
        0x05, 0xFE, 0x02, 0xFE,  # CRC
        0xA3, 0x1A, 0x8D, 0xEB,  # CRC
        0x00, 0x00, 0x00, 0x00,  # IEND length
        0x49, 0x45, 0x4E, 0x44,  # IEND
        0xAE, 0x42, 0x60, 0x82,  # CRC
    ])
