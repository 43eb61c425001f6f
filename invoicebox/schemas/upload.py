"""Pydantic schemas for file uploads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ImportDebug(BaseModel):
    """How the sheet was interpreted, for troubleshooting mismatched columns."""

    headers: list[str]
    header_map: dict[str, str] = Field(..., alias="map")
    sample_row: dict[str, Any] | None = Field(None, alias="sampleRow")
    header_row_index: int = Field(..., alias="headerRowIndex")

    model_config = ConfigDict(populate_by_name=True)


class ImportDetails(BaseModel):
    """Statistics of a finished client import."""

    mapped_fields: list[str] = Field(..., alias="mappedFields")
    total_rows: int = Field(..., alias="totalRows")
    imported: int
    debug: ImportDebug

    model_config = ConfigDict(populate_by_name=True)


class ImportResponse(BaseModel):
    """Response after importing a client spreadsheet."""

    message: str
    details: ImportDetails


class LogoUploadResponse(BaseModel):
    """Response after uploading a branding logo."""

    url: str
