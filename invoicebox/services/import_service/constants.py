"""Vocabulary and thresholds for client spreadsheet imports."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class CanonicalField(str, Enum):
    """Target client attribute that spreadsheet headers are mapped onto."""

    COMPANY_NAME = "companyName"
    CONTACT_NAME = "contactName"
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    CLIENT_NAME = "clientName"
    EMAIL = "email"
    PHONE = "phone"
    CUI = "cui"
    REG_COM = "regCom"
    ADDRESS = "address"
    CITY = "city"
    COUNTY = "county"
    COUNTRY = "country"
    ZIP_CODE = "zipCode"


# Rows scanned when looking for the header row
HEADER_SEARCH_LIMIT = 20

# A row needs at least this many keyword hits to be chosen over row 0
MIN_HEADER_MATCHES = 2

# Data rows sampled when guessing the company column from cell content
COMPANY_SAMPLE_ROWS = 20

# Column score total must be strictly greater than this; two generic
# business keywords (5 + 5) alone do not qualify
COMPANY_COLUMN_THRESHOLD = 10

# Company score weights
LEGAL_ENTITY_WEIGHT = 10
BUSINESS_KEYWORD_WEIGHT = 5
SYMBOL_WEIGHT = 3
ALPHANUMERIC_WEIGHT = 1

# Header synonyms per canonical field, in match priority order
COLUMN_SYNONYMS: Mapping[CanonicalField, tuple[str, ...]] = MappingProxyType({
    CanonicalField.COMPANY_NAME: (
        # English
        "company", "company name", "business", "organization", "entity", "firm",
        "client company",
        # Romanian
        "companie", "nume companie", "firma", "nume firma", "societate", "denumire",
        "entitate",
        # German
        "firma", "unternehmen", "gesellschaft", "firmenname",
        # Dutch / Flemish
        "bedrijf", "bedrijfsnaam", "onderneming", "maatschappij",
        # French
        "société", "entreprise", "raison sociale", "nom de l'entreprise",
        # Italian / Spanish
        "azienda", "impresa", "società", "empresa", "nombre de la empresa",
        "razón social",
        # Nordic
        "företag", "bolag", "selskap", "virksomhet", "selskabsnavn",
    ),
    CanonicalField.CONTACT_NAME: (
        "contact", "contact person", "contact name", "person", "representative",
        "contact", "persoana contact", "persoana de contact", "nume contact",
        "delegat", "reprezentant",
        "kontakt", "ansprechpartner", "kontaktperson",
        "contact", "contactpersoon",
        "contact", "personne de contact",
        "contatto", "persona di contatto", "contacto", "persona de contacto",
        "kontakt", "kontaktperson",
    ),
    CanonicalField.FIRST_NAME: (
        "prenume", "first name", "first_name", "given name", "forename", "vorname",
        "voornaam", "prénom", "nombre", "förnamn",
    ),
    CanonicalField.LAST_NAME: (
        "nume", "nume familie", "last name", "last_name", "surname", "family name",
        "nachname", "achternaam", "nom", "apellido", "efternamn",
    ),
    CanonicalField.CLIENT_NAME: (
        "name", "full name", "nume complet", "client", "nume prenume", "nume",
        "naam", "nom", "nombre", "namn", "navn",
    ),
    CanonicalField.EMAIL: (
        "email", "e-mail", "mail", "adresa email", "courriel", "correo",
    ),
    CanonicalField.PHONE: (
        "phone", "telefon", "tel", "mobile", "mobil", "celular", "handy",
        "telefoon", "téléphone",
    ),
    CanonicalField.CUI: (
        "cui", "vat", "vat number", "cod fiscal", "tax id", "fiscal code", "cf",
        "ust-id", "btw", "tva", "p.iva", "nif", "org nr", "cvr",
    ),
    CanonicalField.REG_COM: (
        "reg com", "j", "nr reg", "registration number", "trade registry",
        "nr. reg. com.", "hrb", "kvk", "siret", "org number",
    ),
    CanonicalField.ADDRESS: (
        "address", "adresa", "street", "strada", "sediu", "strasse", "straat",
        "rue", "calle", "gata", "gate", "vej",
    ),
    CanonicalField.CITY: (
        "city", "oras", "localitate", "stadt", "stad", "ville", "città", "ciudad",
    ),
    CanonicalField.COUNTY: (
        "county", "judet", "district", "state", "province", "bundesland",
        "provincie", "region", "län", "fylke",
    ),
    CanonicalField.COUNTRY: (
        "country", "tara", "nation", "land", "pays", "paese", "pais",
    ),
    CanonicalField.ZIP_CODE: (
        "zip", "cod postal", "zip code", "postal code", "plz", "postcode",
        "code postal", "cap",
    ),
})

# Legal entity suffixes (RO, EN, DE/CH/AT, NL/BE, Nordics, FR, IT, ES, PL, HU, CZ/SK, Balkans)
COMPANY_INDICATORS: tuple[str, ...] = (
    "srl", "s.r.l", "sa", "s.a", "pfa", "i.i",
    "ltd", "limited", "inc", "incorporated", "corp", "corporation", "plc", "llc", "lp",
    "gmbh", "ag", "kg", "ug", "ohg", "e.v.",
    "bv", "b.v.", "nv", "n.v.", "vof", "cv", "stichting",
    "ab", "aktiebolag", "oy", "as", "a/s", "asa", "ivs", "aps",
    "sarl", "sas", "sci", "eurl",
    "spa", "sapa", "snc",
    "sl", "s.l.", "slu", "sa",
    "z.o.o", "sp.k",
    "kft", "rt",
    "sro", "s.r.o",
    "doo", "d.o.o",
)

# Generic business words, each hit adds to the company score
BUSINESS_KEYWORDS: tuple[str, ...] = (
    "group", "grup", "holding", "holdings", "invest", "investment",
    "solutions", "solutii", "systems", "sisteme",
    "services", "servicii", "consulting", "consult", "consultanta",
    "logistics", "logistica", "transport", "trans",
    "construct", "constructii", "imobiliare", "real estate",
    "trade", "trading", "comert", "market", "marketing",
    "shop", "store", "magazin",
    "tech", "technology", "tehnologie", "soft", "software", "it",
    "media", "studio", "design", "agency", "agentie",
    "auto", "motors", "service",
    "farm", "pharma", "medical", "clinic",
    "restaurant", "cafe", "hotel", "resort",
    "global", "international", "euro", "inter",
)

# Substrings that mark a cell as a probable header
KNOWN_HEADER_KEYWORDS: tuple[str, ...] = (
    "name", "nume", "company", "companie", "firma", "email", "phone", "telefon",
    "address", "adresa", "cui", "vat", "contact", "city", "oras",
)

# Literal header tokens tried when no company column was found otherwise
COMPANY_HEADER_TOKENS: tuple[str, ...] = ("company", "firma", "business")

# Headers containing these are never taken as the company name column
COMPANY_HEADER_EXCLUSIONS: tuple[str, ...] = ("phone", "email", "address")

# Raw row keys accepted as a company name when the mapping found none
RAW_COMPANY_KEYS: tuple[str, ...] = ("company", "firma", "company name", "business")


@dataclass(frozen=True)
class ImportVocabulary:
    """Bundle of keyword tables used by the import pipeline.

    Every component takes one of these so tests can swap in their own
    dictionaries; ``DEFAULT_VOCABULARY`` holds the production tables.
    """

    column_synonyms: Mapping[CanonicalField, tuple[str, ...]] = field(
        default_factory=lambda: COLUMN_SYNONYMS
    )
    company_indicators: tuple[str, ...] = COMPANY_INDICATORS
    business_keywords: tuple[str, ...] = BUSINESS_KEYWORDS
    known_header_keywords: tuple[str, ...] = KNOWN_HEADER_KEYWORDS
    company_header_tokens: tuple[str, ...] = COMPANY_HEADER_TOKENS
    company_header_exclusions: tuple[str, ...] = COMPANY_HEADER_EXCLUSIONS
    raw_company_keys: tuple[str, ...] = RAW_COMPANY_KEYS

    def synonyms_for(self, target: CanonicalField) -> tuple[str, ...]:
        """Return the synonyms for a field, empty when the field is unknown."""
        return self.column_synonyms.get(target, ())


DEFAULT_VOCABULARY = ImportVocabulary()

# Upload limits
MAX_IMPORT_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_IMPORT_EXTENSIONS = {"xlsx", "xls", "csv"}

# Rows written to the debug log per import
DEBUG_SAMPLE_ROWS = 5
