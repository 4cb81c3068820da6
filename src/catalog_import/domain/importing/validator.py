"""Per-row validation of category rows.

Rules run in a fixed order and the first failing rule decides the outcome:

1. structure: ``name`` and ``slug`` present and non-blank, ``status`` exactly
   ``"0"`` or ``"1"``, and a non-blank ``position`` an integer the store can
   hold (one skip record per failing field);
2. the slug has not already been accepted by this validator (one batch, or a
   whole source in a validate-only pass);
3. a non-blank ``parent_id`` resolves to an existing category; ids that are
   not integers or out of the stored range never resolve.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import ValidationError

from catalog_import.domain.importing.rows import CategoryRow, parse_category_id
from catalog_import.domain.model import ImportErrorCode

if TYPE_CHECKING:
    from collections.abc import Iterable

    from catalog_import.domain.importing.cache import CategoryLookupCache
    from catalog_import.domain.importing.errors import SkipReport
    from catalog_import.domain.model import Row
    from catalog_import.domain.ports import CategoryRepository

log = logging.getLogger(__name__)


class RowValidator:
    """Decides whether a row is safe to write.

    Holds the slugs accepted so far; one instance covers exactly one batch
    (or one validate-only pass over a source).
    """

    def __init__(
        self,
        *,
        cache: CategoryLookupCache,
        categories: CategoryRepository,
        report: SkipReport,
    ) -> None:
        self._cache = cache
        self._categories = categories
        self._report = report
        self._accepted_slugs: set[str] = set()

    @property
    def report(self) -> SkipReport:
        return self._report

    @property
    def accepted_slugs(self) -> frozenset[str]:
        return frozenset(self._accepted_slugs)

    def reset(self) -> None:
        self._accepted_slugs.clear()

    def validate_row(self, row: Row, row_number: int) -> bool:
        return self.validate(row, row_number) is not None

    def validate(self, row: Row, row_number: int) -> CategoryRow | None:
        """Return the decoded row, or ``None`` after recording why it was rejected."""

        try:
            parsed = CategoryRow.model_validate(dict(row))
        except ValidationError as exc:
            self._record_invalid_attributes(exc, row_number)
            return None

        if parsed.slug in self._accepted_slugs:
            self._report.skip_row(row_number, ImportErrorCode.DUPLICATE_SLUG, "slug")
            return None
        self._accepted_slugs.add(parsed.slug)

        if not self._parent_exists(parsed.parent_id):
            self._report.skip_row(row_number, ImportErrorCode.PARENT_NOT_FOUND, "parent_id")
            return None

        return parsed

    def _record_invalid_attributes(self, exc: ValidationError, row_number: int) -> None:
        failed_columns: set[str] = set()
        for error in exc.errors():
            column = str(error["loc"][0]) if error["loc"] else ""
            if column in failed_columns:
                continue
            failed_columns.add(column)
            self._report.skip_row(
                row_number,
                ImportErrorCode.INVALID_ATTRIBUTE,
                column,
                error["msg"],
            )

    def _parent_exists(self, parent_id: str | None) -> bool:
        try:
            category_id = parse_category_id(parent_id)
        except ValueError:
            return False
        if category_id is None:
            return True
        if self._cache.has_id(category_id):
            return True
        return self._categories.find_by_id(category_id) is not None


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    processed_rows: int
    invalid_rows: int
    error_count: int

    @property
    def valid_rows(self) -> int:
        return self.processed_rows - self.invalid_rows


def validate_rows(
    rows: Iterable[Row],
    validator: RowValidator,
    *,
    first_row_number: int = 1,
) -> ValidationSummary:
    """Run ``validator`` over ``rows`` without writing anything."""

    errors_before = len(validator.report)
    processed = 0
    invalid = 0
    for offset, row in enumerate(rows):
        processed += 1
        if not validator.validate_row(row, first_row_number + offset):
            invalid += 1
    summary = ValidationSummary(
        processed_rows=processed,
        invalid_rows=invalid,
        error_count=len(validator.report) - errors_before,
    )
    log.info(
        "Validated %s rows: %s invalid, %s errors",
        summary.processed_rows,
        summary.invalid_rows,
        summary.error_count,
    )
    return summary
