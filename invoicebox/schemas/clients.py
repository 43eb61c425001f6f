"""Pydantic schemas for Client model."""

from datetime import datetime
from typing import Any

from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from invoicebox.services.import_service import require_name


class ClientCreate(BaseModel):
    """Schema for creating a client by hand."""

    name: str = Field(..., min_length=1, max_length=255)
    contact_person: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=64)
    cui: str | None = Field(None, max_length=64, description="Fiscal registration code")
    reg_com: str | None = Field(None, max_length=64, description="Trade register number")
    address: str | None = None
    city: str | None = Field(None, max_length=255)
    county: str | None = Field(None, max_length=255)
    country: str | None = Field(None, max_length=255)
    zip_code: str | None = Field(None, max_length=32)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return require_name(v)


class ClientUpdate(BaseModel):
    """Schema for updating a client. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    contact_person: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=64)
    cui: str | None = Field(None, max_length=64)
    reg_com: str | None = Field(None, max_length=64)
    address: str | None = None
    city: str | None = Field(None, max_length=255)
    county: str | None = Field(None, max_length=255)
    country: str | None = Field(None, max_length=255)
    zip_code: str | None = Field(None, max_length=32)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return require_name(v)


class ClientResponse(BaseModel):
    """Schema for client response."""

    id: str
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    cui: str | None = None
    reg_com: str | None = None
    address: str | None = None
    city: str | None = None
    county: str | None = None
    country: str | None = None
    zip_code: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", mode="before")
    @classmethod
    def convert_objectid_to_str(cls, v: Any) -> str:
        """Convert ObjectId to string."""
        if isinstance(v, PydanticObjectId):
            return str(v)
        return v
