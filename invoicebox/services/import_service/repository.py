"""Persistence seam for clients.

The importer and the clients API only talk to a ``ClientRepository``, so
both can run against an in-memory store in tests.
"""

from typing import Any, Protocol

from beanie import PydanticObjectId

from invoicebox.models.client import Client

from .classifier import ResolvedClient


class ClientRepository(Protocol):
    """Storage operations on an owner's clients."""

    async def count(self, owner_id: PydanticObjectId) -> int:
        """Return how many clients the owner already has."""
        ...

    async def insert_many(self, owner_id: PydanticObjectId, records: list[ResolvedClient]) -> None:
        """Insert all records for the owner in one call."""
        ...

    async def list_for_owner(self, owner_id: PydanticObjectId) -> list[Any]:
        """Return the owner's clients, newest first."""
        ...

    async def create(self, owner_id: PydanticObjectId, record: ResolvedClient) -> Any:
        """Insert a single client and return it."""
        ...

    async def get(self, owner_id: PydanticObjectId, client_id: PydanticObjectId) -> Any | None:
        """Return the client if the owner has it."""
        ...

    async def update(
        self, owner_id: PydanticObjectId, client_id: PydanticObjectId, changes: dict[str, Any]
    ) -> Any | None:
        """Apply field changes to an owned client. Returns None if not found."""
        ...

    async def delete(self, owner_id: PydanticObjectId, client_id: PydanticObjectId) -> bool:
        """Delete a client if the owner has it. Returns False otherwise."""
        ...


class BeanieClientRepository:
    """ClientRepository backed by the ``clients`` MongoDB collection."""

    async def count(self, owner_id: PydanticObjectId) -> int:
        return await Client.find(Client.owner_id == owner_id).count()

    async def insert_many(self, owner_id: PydanticObjectId, records: list[ResolvedClient]) -> None:
        if not records:
            return
        await Client.insert_many(
            [Client(owner_id=owner_id, **record.model_dump()) for record in records]
        )

    async def list_for_owner(self, owner_id: PydanticObjectId) -> list[Client]:
        return await Client.find(Client.owner_id == owner_id).sort(-Client.created_at).to_list()

    async def create(self, owner_id: PydanticObjectId, record: ResolvedClient) -> Client:
        client = Client(owner_id=owner_id, **record.model_dump())
        await client.insert()
        return client

    async def get(self, owner_id: PydanticObjectId, client_id: PydanticObjectId) -> Client | None:
        return await Client.find_one(Client.id == client_id, Client.owner_id == owner_id)

    async def update(
        self, owner_id: PydanticObjectId, client_id: PydanticObjectId, changes: dict[str, Any]
    ) -> Client | None:
        client = await self.get(owner_id, client_id)
        if client is None:
            return None
        for name, value in changes.items():
            setattr(client, name, value)
        await client.save()
        return client

    async def delete(self, owner_id: PydanticObjectId, client_id: PydanticObjectId) -> bool:
        client = await self.get(owner_id, client_id)
        if client is None:
            return False
        await client.delete()
        return True


def get_client_repository() -> ClientRepository:
    """FastAPI dependency returning the default repository."""
    return BeanieClientRepository()
