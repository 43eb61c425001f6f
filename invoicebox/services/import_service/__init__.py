"""Import service package for reading client spreadsheets and creating client records."""

from .classifier import (
    ResolutionBranch,
    ResolvedClient,
    ResolvedName,
    build_client_record,
    build_full_name,
    require_name,
    cell_to_str,
    resolve_row,
)
from .constants import (
    ALLOWED_IMPORT_EXTENSIONS,
    COLUMN_SYNONYMS,
    COMPANY_COLUMN_THRESHOLD,
    DEFAULT_VOCABULARY,
    HEADER_SEARCH_LIMIT,
    MAX_IMPORT_FILE_SIZE,
    MIN_HEADER_MATCHES,
    CanonicalField,
    ImportVocabulary,
)
from .errors import EmptySheetError, SpreadsheetError
from .headers import (
    HeaderDetection,
    build_headers,
    detect_header_row,
    rows_to_records,
    scan_header_rows,
)
from .mapping import (
    HeaderMapping,
    build_header_map,
    detect_company_column,
    extract_row,
    find_best_match,
    find_literal_company_header,
    normalize_header,
)
from .observer import DebugFileObserver, ImportObserver, LoggingObserver
from .parsers import file_extension, read_sheet_file, read_sheet_rows
from .processor import ClientImporter, ImportResult, remove_temp_file
from .repository import BeanieClientRepository, ClientRepository, get_client_repository
from .scoring import company_score, looks_like_company

__all__ = [
    # Constants
    "ALLOWED_IMPORT_EXTENSIONS",
    "COLUMN_SYNONYMS",
    "COMPANY_COLUMN_THRESHOLD",
    "DEFAULT_VOCABULARY",
    "HEADER_SEARCH_LIMIT",
    "MAX_IMPORT_FILE_SIZE",
    "MIN_HEADER_MATCHES",
    "CanonicalField",
    "ImportVocabulary",
    # Errors
    "EmptySheetError",
    "SpreadsheetError",
    # Scoring
    "company_score",
    "looks_like_company",
    # Header detection
    "HeaderDetection",
    "build_headers",
    "detect_header_row",
    "rows_to_records",
    "scan_header_rows",
    # Mapping
    "HeaderMapping",
    "build_header_map",
    "detect_company_column",
    "extract_row",
    "find_best_match",
    "find_literal_company_header",
    "normalize_header",
    # Classification
    "ResolutionBranch",
    "ResolvedClient",
    "ResolvedName",
    "build_client_record",
    "build_full_name",
    "require_name",
    "cell_to_str",
    "resolve_row",
    # Parsers
    "file_extension",
    "read_sheet_file",
    "read_sheet_rows",
    # Observers
    "DebugFileObserver",
    "ImportObserver",
    "LoggingObserver",
    # Processor
    "BeanieClientRepository",
    "ClientImporter",
    "ClientRepository",
    "ImportResult",
    "get_client_repository",
    "remove_temp_file",
]
