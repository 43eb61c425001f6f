"""Diagnostic hooks for the client import pipeline.

The import core never touches the filesystem itself; it reports what it
decided to an ``ImportObserver``. ``LoggingObserver`` sends everything to the
standard logger and ``DebugFileObserver`` additionally keeps a plain-text
trace of the last import next to the other logs.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .constants import DEBUG_SAMPLE_ROWS

if TYPE_CHECKING:
    from .headers import HeaderDetection
    from .mapping import HeaderMapping

logger = logging.getLogger(__name__)

DEBUG_FILE_NAME = "last_import_debug.txt"


def _dump(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)


class ImportObserver:
    """No-op observer; subclasses override the hooks they care about."""

    def header_detected(self, detection: "HeaderDetection", headers: list[str]) -> None:
        pass

    def field_mapped(self, field: str, header: str, strategy: str, score: int | None = None) -> None:
        pass

    def mapping_finished(self, mapping: "HeaderMapping") -> None:
        pass

    def row_extracted(self, index: int, record: dict[str, Any], extracted: dict[str, Any]) -> None:
        pass

    def import_rejected(self, error: BaseException) -> None:
        pass

    def import_failed(self, error: BaseException) -> None:
        pass


class LoggingObserver(ImportObserver):
    """Observer that reports import decisions through ``logging``."""

    def header_detected(self, detection: "HeaderDetection", headers: list[str]) -> None:
        logger.info(
            "Detected header row %d (%d keyword matches): %s",
            detection.index,
            detection.matches,
            headers,
        )

    def field_mapped(self, field: str, header: str, strategy: str, score: int | None = None) -> None:
        if score is None:
            logger.debug("Mapped '%s' to column '%s' (%s)", field, header, strategy)
        else:
            logger.debug("Mapped '%s' to column '%s' (%s, score %d)", field, header, strategy, score)

    def mapping_finished(self, mapping: "HeaderMapping") -> None:
        for field, headers in mapping.ambiguous.items():
            logger.warning(
                "Ambiguous mapping for '%s': candidates %s, using '%s'",
                field.value,
                headers,
                mapping.header_map[field],
            )
        logger.info("Final mapping: %s", mapping.as_dict())

    def import_rejected(self, error: BaseException) -> None:
        logger.info("Client import rejected: %s", error)

    def import_failed(self, error: BaseException) -> None:
        logger.error("Client import failed: %s", error)


class DebugFileObserver(LoggingObserver):
    """Observer that also writes a trace of the import to a text file.

    The file is rewritten at the start of every import. Write failures are
    logged and ignored so they can never mask the import's own outcome.
    """

    def __init__(self, log_dir: Path, sample_rows: int = DEBUG_SAMPLE_ROWS) -> None:
        self.path = Path(log_dir) / DEBUG_FILE_NAME
        self.sample_rows = sample_rows

    def _write(self, text: str, mode: str = "a") -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, mode, encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            logger.warning("Failed to write import debug file %s: %s", self.path, e)

    def header_detected(self, detection: "HeaderDetection", headers: list[str]) -> None:
        super().header_detected(detection, headers)
        started = datetime.now(timezone.utc).isoformat()
        self._write(
            f"Import started at {started}\n"
            f"Detected Header Row Index: {detection.index} (Matches: {detection.matches})\n"
            f"Headers: {_dump(headers)}\n",
            mode="w",
        )

    def field_mapped(self, field: str, header: str, strategy: str, score: int | None = None) -> None:
        super().field_mapped(field, header, strategy, score)
        if score is None:
            self._write(f"Mapped '{field}' to column '{header}' ({strategy})\n")
        else:
            self._write(f"Mapped '{field}' to column '{header}' ({strategy}, score {score})\n")

    def mapping_finished(self, mapping: "HeaderMapping") -> None:
        super().mapping_finished(mapping)
        for field, headers in mapping.ambiguous.items():
            self._write(f"Ambiguous '{field.value}': {_dump(headers)}\n")
        self._write(f"Final Mapping: {_dump(mapping.as_dict())}\n\n")

    def row_extracted(self, index: int, record: dict[str, Any], extracted: dict[str, Any]) -> None:
        if index >= self.sample_rows:
            return
        self._write(f"Row: {_dump(record)}\nExtracted: {_dump(extracted)}\n")

    def import_rejected(self, error: BaseException) -> None:
        super().import_rejected(error)
        self._write(f"\nREJECTED: {error}\n")

    def import_failed(self, error: BaseException) -> None:
        super().import_failed(error)
        self._write(f"\nFATAL ERROR: {error}\n")
