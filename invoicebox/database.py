"""MongoDB connection and Beanie initialisation for the InvoiceBox documents."""

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from invoicebox.config import settings
from invoicebox.models import Client, Invoice, InvoiceReminder, User

DOCUMENT_MODELS = [User, Client, Invoice, InvoiceReminder]

_client: AsyncIOMotorClient | None = None


async def init_db() -> None:
    """Connect to the configured database and register the documents with Beanie."""
    global _client

    _client = AsyncIOMotorClient(
        settings.mongodb_url,
        minPoolSize=settings.min_pool_size,
        maxPoolSize=settings.max_pool_size,
    )
    await init_beanie(
        database=_client[settings.mongodb_database],
        document_models=DOCUMENT_MODELS,
    )


async def close_db() -> None:
    """Close the connection opened by ``init_db``, if any."""
    global _client

    if _client is not None:
        _client.close()
        _client = None
