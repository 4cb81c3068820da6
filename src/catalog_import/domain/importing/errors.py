"""Skip records and the error collector shared by validation and import."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from catalog_import.domain.model import ImportErrorCode

if TYPE_CHECKING:
    from collections.abc import Iterator

log = logging.getLogger(__name__)

DEFAULT_MESSAGES: Final[dict[ImportErrorCode, str]] = {
    ImportErrorCode.INVALID_ATTRIBUTE: "Invalid value",
    ImportErrorCode.DUPLICATE_SLUG: "Slug is already used by an earlier row",
    ImportErrorCode.PARENT_NOT_FOUND: "Parent category does not exist",
}


class CatalogImportError(Exception):
    """Base class for fatal import errors."""


class SourceFormatError(CatalogImportError):
    """Raised when a source file cannot be read or lacks required columns."""


class BatchNotFoundError(CatalogImportError):
    """Raised when an import batch id does not resolve."""


class CategoryNotFoundError(CatalogImportError):
    """Raised when a category disappears between lookup and update."""


@dataclass(frozen=True, slots=True)
class SkipRecord:
    """A rejected row and the reason it was not applied."""

    row_number: int
    error_code: ImportErrorCode
    column_name: str | None
    message: str


class SkipReport:
    """Accumulates skip records over an import run.

    Rows are never aborted by a skip; ``allowed_errors`` only tells the
    orchestrator when to stop scheduling further batches.
    """

    def __init__(self, *, allowed_errors: int | None = None) -> None:
        self.allowed_errors = allowed_errors
        self._records: list[SkipRecord] = []

    def skip_row(
        self,
        row_number: int,
        error_code: ImportErrorCode,
        column_name: str | None = None,
        message: str | None = None,
    ) -> SkipRecord:
        record = SkipRecord(
            row_number=row_number,
            error_code=error_code,
            column_name=column_name,
            message=message or DEFAULT_MESSAGES[error_code],
        )
        self._records.append(record)
        log.debug(
            "Skipping row %s: %s on %s (%s)",
            row_number,
            error_code,
            column_name,
            record.message,
        )
        return record

    @property
    def records(self) -> tuple[SkipRecord, ...]:
        return tuple(self._records)

    @property
    def error_count(self) -> int:
        return len(self._records)

    @property
    def invalid_rows(self) -> frozenset[int]:
        return frozenset(record.row_number for record in self._records)

    def by_code(self) -> dict[ImportErrorCode, list[int]]:
        """Group the affected row numbers by error code."""
        grouped: defaultdict[ImportErrorCode, dict[int, None]] = defaultdict(dict)
        for record in self._records:
            grouped[record.error_code][record.row_number] = None
        return {code: list(rows) for code, rows in grouped.items()}

    def is_error_limit_exceeded(self) -> bool:
        if self.allowed_errors is None:
            return False
        return self.error_count > self.allowed_errors

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SkipRecord]:
        return iter(self._records)
