"""Client import orchestration.

Ties the pipeline together: raw rows -> header row -> header map -> one
resolved client per usable row -> plan quota check -> a single batch insert.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from beanie import PydanticObjectId

from invoicebox.services.plans import QuotaExceededError, check_quota

from .classifier import ResolvedClient, build_client_record, resolve_row
from .constants import DEFAULT_VOCABULARY, ImportVocabulary
from .errors import EmptySheetError
from .headers import HeaderDetection, rows_to_records, scan_header_rows
from .mapping import HeaderMapping, build_header_map, extract_row
from .observer import ImportObserver
from .parsers import read_sheet_file
from .repository import ClientRepository

logger = logging.getLogger(__name__)


@dataclass
class PreparedImport:
    """Everything derived from a sheet before anything is persisted."""

    detection: HeaderDetection
    headers: list[str]
    records: list[dict[str, Any]]
    mapping: HeaderMapping
    clients: list[ResolvedClient] = field(default_factory=list)

    @property
    def skipped_rows(self) -> int:
        return len(self.records) - len(self.clients)


@dataclass
class ImportResult:
    """Statistics returned to the caller after a successful import."""

    imported_count: int
    mapped_fields: list[str]
    total_rows: int
    header_row_index: int
    headers: list[str]
    header_map: dict[str, str]
    sample_row: dict[str, Any] | None
    skipped_rows: int = 0
    ambiguous_fields: dict[str, list[str]] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return f"Successfully imported {self.imported_count} clients"


class ClientImporter:
    """Imports client spreadsheets for one account at a time.

    Args:
        repository: Where clients are counted and inserted.
        vocabulary: Keyword tables for header matching and scoring.
        observer: Receives diagnostic callbacks; defaults to a no-op.
    """

    def __init__(
        self,
        repository: ClientRepository,
        vocabulary: ImportVocabulary = DEFAULT_VOCABULARY,
        observer: ImportObserver | None = None,
    ) -> None:
        self.repository = repository
        self.vocabulary = vocabulary
        self.observer = observer or ImportObserver()

    def prepare(self, rows: Sequence[Sequence[Any]]) -> PreparedImport:
        """Run the pure part of the pipeline on raw sheet rows.

        Raises:
            EmptySheetError: If there are no data rows below the header.
        """
        detection = scan_header_rows(rows, vocabulary=self.vocabulary)
        headers, records = rows_to_records(rows, detection.index)
        if not records:
            raise EmptySheetError("File is empty")

        self.observer.header_detected(detection, headers)
        mapping = build_header_map(headers, records, self.vocabulary, self.observer)

        prepared = PreparedImport(
            detection=detection,
            headers=headers,
            records=records,
            mapping=mapping,
        )
        for i, record in enumerate(records):
            extracted = extract_row(record, mapping.header_map)
            self.observer.row_extracted(i, record, {f.value: v for f, v in extracted.items()})

            resolved = resolve_row(extracted, record, self.vocabulary)
            if resolved is None:
                continue
            prepared.clients.append(build_client_record(extracted, resolved))

        if prepared.skipped_rows:
            logger.info("Skipped %d rows without a usable name", prepared.skipped_rows)
        return prepared

    async def import_rows(
        self,
        rows: Sequence[Sequence[Any]],
        owner_id: PydanticObjectId,
        plan: Any,
    ) -> ImportResult:
        """Import raw sheet rows for an owner.

        Either every resolved client is inserted or none is.

        Raises:
            EmptySheetError: If the sheet has no data rows.
            QuotaExceededError: If the import would exceed the plan ceiling.
        """
        prepared = self.prepare(rows)
        clients = prepared.clients

        if clients:
            current = await self.repository.count(owner_id)
            check_quota(plan, current, len(clients))
            await self.repository.insert_many(owner_id, clients)

        logger.info(
            "Imported %d of %d rows for owner %s",
            len(clients),
            len(prepared.records),
            owner_id,
        )

        return ImportResult(
            imported_count=len(clients),
            mapped_fields=prepared.mapping.mapped_fields,
            total_rows=len(prepared.records),
            header_row_index=prepared.detection.index,
            headers=prepared.headers,
            header_map=prepared.mapping.as_dict(),
            sample_row=prepared.records[0] if prepared.records else None,
            skipped_rows=prepared.skipped_rows,
            ambiguous_fields={f.value: h for f, h in prepared.mapping.ambiguous.items()},
        )

    async def import_file(
        self,
        path: Path,
        owner_id: PydanticObjectId,
        plan: Any,
    ) -> ImportResult:
        """Read a spreadsheet from disk and import it.

        Empty sheets and quota rejections are reported to the observer as
        rejections; anything else as a failure. Both are re-raised.
        """
        try:
            rows = read_sheet_file(path)
            return await self.import_rows(rows, owner_id, plan)
        except (EmptySheetError, QuotaExceededError) as e:
            self.observer.import_rejected(e)
            raise
        except Exception as e:
            self.observer.import_failed(e)
            raise


def remove_temp_file(path: Path) -> None:
    """Delete an uploaded temp file, logging instead of raising on failure."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Failed to remove temp upload %s: %s", path, e)
