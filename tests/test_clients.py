"""Tests for the client management endpoints."""

import pytest
from beanie import PydanticObjectId
from httpx import AsyncClient

from invoicebox.models.user import Plan


class TestListClients:
    @pytest.mark.asyncio
    async def test_list_only_own_clients(self, client: AsyncClient, repository, user) -> None:
        repository.seed(user.id, 2)
        repository.seed(PydanticObjectId(), 3)

        response = await client.get("/api/clients")

        assert response.status_code == 200
        data = response.json()
        assert [c["name"] for c in data] == ["Existing 1", "Existing 0"]
        assert all(isinstance(c["id"], str) for c in data)

    @pytest.mark.asyncio
    async def test_requires_authentication(self, anonymous_client: AsyncClient) -> None:
        response = await anonymous_client.get("/api/clients")
        assert response.status_code == 401


class TestCreateClient:
    @pytest.mark.asyncio
    async def test_create(self, client: AsyncClient, repository, user) -> None:
        response = await client.post(
            "/api/clients",
            json={"name": "Acme SRL", "contact_person": "Jane Doe", "cui": "RO123"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Acme SRL"
        assert data["contact_person"] == "Jane Doe"
        assert data["cui"] == "RO123"
        assert data["email"] is None
        assert len(repository.for_owner(user.id)) == 1

    @pytest.mark.asyncio
    async def test_name_is_required(self, client: AsyncClient) -> None:
        response = await client.post("/api/clients", json={"name": ""})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_blank_name_is_rejected(self, client: AsyncClient, repository, user) -> None:
        response = await client.post("/api/clients", json={"name": "   "})
        assert response.status_code == 422
        assert repository.for_owner(user.id) == []

    @pytest.mark.asyncio
    async def test_name_is_trimmed(self, client: AsyncClient, repository, user) -> None:
        response = await client.post("/api/clients", json={"name": "  Acme SRL "})
        assert response.status_code == 201
        assert response.json()["name"] == "Acme SRL"
        assert repository.for_owner(user.id)[0].name == "Acme SRL"

    @pytest.mark.asyncio
    async def test_free_plan_ceiling(self, client: AsyncClient, repository, user) -> None:
        repository.seed(user.id, 3)

        response = await client.post("/api/clients", json={"name": "One Too Many SRL"})

        assert response.status_code == 403
        assert response.json()["detail"] == (
            "Free Plan limit reached (3 clients). Please upgrade to add more."
        )
        assert len(repository.for_owner(user.id)) == 3

    @pytest.mark.asyncio
    async def test_pro_plan_has_no_ceiling(self, client: AsyncClient, repository, user) -> None:
        user.plan = Plan.PRO
        repository.seed(user.id, 100)

        response = await client.post("/api/clients", json={"name": "Acme SRL"})
        assert response.status_code == 201


class TestDeleteClient:
    @pytest.mark.asyncio
    async def test_delete(self, client: AsyncClient, repository, user) -> None:
        repository.seed(user.id, 1)
        client_id = str(repository.for_owner(user.id)[0].id)

        response = await client.delete(f"/api/clients/{client_id}")

        assert response.status_code == 204
        assert repository.for_owner(user.id) == []

    @pytest.mark.asyncio
    async def test_cannot_delete_other_owners_client(self, client: AsyncClient, repository) -> None:
        other = PydanticObjectId()
        repository.seed(other, 1)
        client_id = str(repository.for_owner(other)[0].id)

        response = await client.delete(f"/api/clients/{client_id}")

        assert response.status_code == 404
        assert len(repository.for_owner(other)) == 1

    @pytest.mark.asyncio
    async def test_invalid_id(self, client: AsyncClient) -> None:
        response = await client.delete("/api/clients/not-an-id")
        assert response.status_code == 404
        assert response.json()["detail"] == "Client not found"


class TestUpdateClient:
    @pytest.mark.asyncio
    async def test_update_changes_only_given_fields(self, client: AsyncClient, repository, user) -> None:
        repository.seed(user.id, 1)
        stored = repository.for_owner(user.id)[0]
        stored.email = "old@example.com"

        response = await client.put(
            f"/api/clients/{stored.id}",
            json={"name": "Renamed SRL", "city": "Cluj"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed SRL"
        assert data["city"] == "Cluj"
        assert data["email"] == "old@example.com"
        assert stored.name == "Renamed SRL"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", None])
    async def test_update_rejects_blank_name(self, client: AsyncClient, repository, user, name) -> None:
        repository.seed(user.id, 1)
        stored = repository.for_owner(user.id)[0]

        response = await client.put(f"/api/clients/{stored.id}", json={"name": name})

        assert response.status_code == 422
        assert stored.name == "Existing 0"

    @pytest.mark.asyncio
    async def test_cannot_update_other_owners_client(self, client: AsyncClient, repository) -> None:
        other = PydanticObjectId()
        repository.seed(other, 1)
        stored = repository.for_owner(other)[0]

        response = await client.put(f"/api/clients/{stored.id}", json={"name": "Mine Now"})

        assert response.status_code == 404
        assert stored.name == "Existing 0"

    @pytest.mark.asyncio
    async def test_update_invalid_id(self, client: AsyncClient) -> None:
        response = await client.put("/api/clients/not-an-id", json={"city": "Iasi"})
        assert response.status_code == 404
