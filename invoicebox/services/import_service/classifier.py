"""Company-versus-person name resolution for imported client rows.

A spreadsheet may carry a company column, a contact column, split first and
last names, a generic "Name" column, or any mix of these. ``resolve_row``
turns whatever is present into the client's display ``name`` and an
optional ``contact_person``, following a fixed priority order. It never
modifies the row it is given.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator

from .constants import DEFAULT_VOCABULARY, CanonicalField, ImportVocabulary
from .scoring import company_score


class ResolutionBranch(str, Enum):
    """Which rule produced a resolved name."""

    COMPANY_COLUMN = "company_column"
    RAW_ROW_COMPANY = "raw_row_company"
    CLIENT_NAME_AS_COMPANY = "client_name_as_company"
    CLIENT_NAME = "client_name"
    SPLIT_NAME = "split_name"
    CONTACT_NAME = "contact_name"


@dataclass(frozen=True)
class ResolvedName:
    """Name and contact person chosen for one row."""

    name: str
    contact_person: str | None
    branch: ResolutionBranch


def require_name(value: str) -> str:
    """Strip a client name, rejecting one that is blank."""
    value = value.strip()
    if not value:
        raise ValueError("Client name must not be blank")
    return value


class ResolvedClient(BaseModel):
    """Client record ready to be persisted. ``name`` is never blank."""

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

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return require_name(v)


def cell_to_str(value: Any) -> str | None:
    """Render a cell as text, or None when it is blank.

    Spreadsheet readers hand back numbers for phone numbers and fiscal codes;
    integral floats lose their trailing ``.0``.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        text = str(value)
    elif isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value)
    text = text.strip()
    return text or None


def build_full_name(first: Any, last: Any) -> str | None:
    """Join first and last names; a value repeated in both is used once."""
    first_text = cell_to_str(first)
    last_text = cell_to_str(last)
    if first_text and last_text:
        if first_text == last_text:
            return first_text
        return f"{first_text} {last_text}"
    return first_text or last_text


def _find_raw_company(record: dict[str, Any], vocabulary: ImportVocabulary) -> str | None:
    for key, value in record.items():
        if str(key).lower().strip() in vocabulary.raw_company_keys:
            return cell_to_str(value)
    return None


def resolve_row(
    extracted: dict[CanonicalField, Any],
    record: dict[str, Any] | None = None,
    vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
) -> ResolvedName | None:
    """Decide the client name and contact person for one row.

    Rules, first match wins:

    1. A mapped company column: company is the name; contact is the contact
       column, else the split first/last name, else the generic name.
    2. A raw row key literally called company/firma/company name/business:
       that value is the name; contact is the generic name, else the split
       name.
    3. A generic name that scores as a company: it is the name; contact is
       the contact column, else the split name.
    4. Any generic name: same as above, even if it looks like a person.
    5. A split first/last name: used as both name and contact.
    6. A contact column: used as both name and contact.

    A generic name paired with a last name but no first name stands in for
    the first name, unless both hold the same value.

    Args:
        extracted: Canonical field values for the row.
        record: The raw row keyed by sheet header, for rule 2.
        vocabulary: Keyword tables.

    Returns:
        ResolvedName, or None when the row has nothing usable as a name.
    """
    company = cell_to_str(extracted.get(CanonicalField.COMPANY_NAME))
    contact = cell_to_str(extracted.get(CanonicalField.CONTACT_NAME))
    client_name = cell_to_str(extracted.get(CanonicalField.CLIENT_NAME))
    first_value = extracted.get(CanonicalField.FIRST_NAME)
    last_value = extracted.get(CanonicalField.LAST_NAME)

    if (
        not first_value
        and extracted.get(CanonicalField.CLIENT_NAME)
        and last_value
        and extracted.get(CanonicalField.CLIENT_NAME) != last_value
    ):
        first_value = extracted.get(CanonicalField.CLIENT_NAME)

    split_name = build_full_name(first_value, last_value)

    if company:
        return ResolvedName(
            name=company,
            contact_person=contact or split_name or client_name,
            branch=ResolutionBranch.COMPANY_COLUMN,
        )

    raw_company = _find_raw_company(record or {}, vocabulary)
    if raw_company:
        return ResolvedName(
            name=raw_company,
            contact_person=client_name or split_name,
            branch=ResolutionBranch.RAW_ROW_COMPANY,
        )

    if client_name:
        branch = (
            ResolutionBranch.CLIENT_NAME_AS_COMPANY
            if company_score(client_name, vocabulary) > 0
            else ResolutionBranch.CLIENT_NAME
        )
        return ResolvedName(
            name=client_name,
            contact_person=contact or split_name,
            branch=branch,
        )

    if split_name:
        return ResolvedName(
            name=split_name,
            contact_person=split_name,
            branch=ResolutionBranch.SPLIT_NAME,
        )

    if contact:
        return ResolvedName(
            name=contact,
            contact_person=contact,
            branch=ResolutionBranch.CONTACT_NAME,
        )

    return None


def build_client_record(
    extracted: dict[CanonicalField, Any],
    resolved: ResolvedName,
) -> ResolvedClient:
    """Combine a resolved name with the remaining mapped fields."""
    return ResolvedClient(
        name=resolved.name,
        contact_person=resolved.contact_person,
        email=cell_to_str(extracted.get(CanonicalField.EMAIL)),
        phone=cell_to_str(extracted.get(CanonicalField.PHONE)),
        cui=cell_to_str(extracted.get(CanonicalField.CUI)),
        reg_com=cell_to_str(extracted.get(CanonicalField.REG_COM)),
        address=cell_to_str(extracted.get(CanonicalField.ADDRESS)),
        city=cell_to_str(extracted.get(CanonicalField.CITY)),
        county=cell_to_str(extracted.get(CanonicalField.COUNTY)),
        country=cell_to_str(extracted.get(CanonicalField.COUNTRY)),
        zip_code=cell_to_str(extracted.get(CanonicalField.ZIP_CODE)),
    )
