"""Client document model."""

from datetime import datetime
from typing import Optional

from beanie import Document, Indexed, PydanticObjectId
from pydantic import Field


class Client(Document):
    """A vendor's customer, created by hand or by spreadsheet import.

    Imports never merge: importing the same sheet twice creates duplicates.
    """

    owner_id: Indexed(PydanticObjectId)
    name: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    cui: Optional[str] = None
    reg_com: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    county: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "clients"

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name={self.name})>"
