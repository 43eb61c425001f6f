"""Client management endpoints."""

import logging
from typing import Annotated

from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, Depends, HTTPException, status

from invoicebox.schemas.clients import ClientCreate, ClientResponse, ClientUpdate
from invoicebox.services.auth import RequireAuth
from invoicebox.services.import_service import (
    ClientRepository,
    ResolvedClient,
    get_client_repository,
)
from invoicebox.services.plans import QuotaExceededError, check_quota

logger = logging.getLogger(__name__)

router = APIRouter()

Repository = Annotated[ClientRepository, Depends(get_client_repository)]


def _client_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")


def parse_object_id(value: str, not_found: HTTPException) -> PydanticObjectId:
    """Parse a path id, treating a malformed one as an unknown resource."""
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        raise not_found


@router.get("", response_model=list[ClientResponse])
async def list_clients(current_user: RequireAuth, repository: Repository) -> list[ClientResponse]:
    """List the current user's clients, newest first."""
    clients = await repository.list_for_owner(current_user.id)
    return [ClientResponse.model_validate(c) for c in clients]


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreate,
    current_user: RequireAuth,
    repository: Repository,
) -> ClientResponse:
    """Add a single client, subject to the plan's client limit."""
    current = await repository.count(current_user.id)
    try:
        check_quota(current_user.plan, current, 1)
    except QuotaExceededError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)

    client = await repository.create(
        current_user.id,
        ResolvedClient(**client_data.model_dump()),
    )
    logger.info("Created client %s for owner %s", client.id, current_user.id)
    return ClientResponse.model_validate(client)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    client_data: ClientUpdate,
    current_user: RequireAuth,
    repository: Repository,
) -> ClientResponse:
    """Update fields of one of the current user's clients.

    Only fields present in the request body are changed. ``name`` cannot be
    cleared.
    """
    oid = parse_object_id(client_id, _client_not_found())
    changes = client_data.model_dump(exclude_unset=True)
    if "name" in changes and changes["name"] is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Client name must not be blank",
        )

    client = await repository.update(current_user.id, oid, changes)
    if client is None:
        raise _client_not_found()
    logger.info("Updated client %s for owner %s", client.id, current_user.id)
    return ClientResponse.model_validate(client)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: str,
    current_user: RequireAuth,
    repository: Repository,
) -> None:
    """Delete one of the current user's clients."""
    oid = parse_object_id(client_id, _client_not_found())
    if not await repository.delete(current_user.id, oid):
        raise _client_not_found()
