"""Reconcile one import batch into the category tree.

Rows are handled strictly in input order: later rows depend on the slugs
accepted by earlier ones and on categories they created. After the last row
the nested-interval encoding of the whole tree is rebuilt once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from catalog_import.domain.importing.cache import CategoryLookupCache
from catalog_import.domain.importing.errors import SkipRecord, SkipReport
from catalog_import.domain.importing.validator import RowValidator
from catalog_import.domain.model import BatchState, BatchSummary

if TYPE_CHECKING:
    from collections.abc import Sequence

    from catalog_import.domain.importing.rows import CategoryFields, CategoryRow
    from catalog_import.domain.model import Category, ImportBatch
    from catalog_import.domain.ports import (
        BatchImportObserver,
        CategoryRepository,
        ChannelSettings,
        ImportBatchRepository,
    )

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BatchImportResult:
    """Outcome of one batch: the write summary and the rows that were skipped."""

    batch_id: int
    summary: BatchSummary
    skipped: tuple[SkipRecord, ...] = ()
    success: bool = True

    @property
    def created(self) -> int:
        return self.summary.created

    @property
    def updated(self) -> int:
        return self.summary.updated


class CategoryBatchReconciler:
    """Drive an ``ImportBatch`` end to end against the category store.

    Row-level problems become skip records and never abort the batch. Store
    errors propagate unchanged and leave the batch state as it was; whatever
    was written before the error stays written.
    """

    def __init__(
        self,
        *,
        categories: CategoryRepository,
        batches: ImportBatchRepository,
        channel: ChannelSettings,
        report: SkipReport | None = None,
        cache: CategoryLookupCache | None = None,
        observers: Sequence[BatchImportObserver] = (),
    ) -> None:
        self._categories = categories
        self._batches = batches
        self._channel = channel
        self._report = report if report is not None else SkipReport()
        self._cache = cache if cache is not None else CategoryLookupCache(categories)
        self._cache_loaded = cache is not None
        self._observers = tuple(observers)

    @property
    def report(self) -> SkipReport:
        return self._report

    @property
    def cache(self) -> CategoryLookupCache:
        return self._cache

    def import_batch(self, batch: ImportBatch) -> BatchImportResult:
        if batch.id is None:
            raise ValueError("import batch must be persisted before it is imported")

        for observer in self._observers:
            observer.before_batch_import(batch)

        root_category_id = self._channel.root_category_id
        locale = self._channel.locale

        if not self._cache_loaded:
            self._cache.init()
            self._cache_loaded = True

        validator = RowValidator(
            cache=self._cache,
            categories=self._categories,
            report=self._report,
        )
        first_record = len(self._report)
        created = 0
        updated = 0

        for index, row in enumerate(batch.data):
            parsed = validator.validate(row, batch.row_number(index))
            if parsed is None:
                continue

            fields = _prepare_fields(parsed, root_category_id=root_category_id, locale=locale)
            existing = self._categories.find_by_slug(parsed.slug)
            if existing is not None and existing.id is not None:
                category = self._categories.update(existing.id, fields)
                updated += 1
            else:
                category = self._categories.create(fields)
                created += 1
            self._remember(category)

        self._categories.rebuild_tree()

        summary = BatchSummary(created=created, updated=updated)
        self._batches.update_batch(batch.id, state=BatchState.PROCESSED, summary=summary)

        for observer in self._observers:
            observer.after_batch_import(batch)

        skipped = self._report.records[first_record:]
        log.info(
            "Imported batch %s: created=%s, updated=%s, skipped=%s",
            batch.id,
            created,
            updated,
            len(skipped),
        )
        return BatchImportResult(batch_id=batch.id, summary=summary, skipped=skipped)

    def _remember(self, category: Category) -> None:
        if category.id is None:
            return
        self._cache.set(category.slug, category.id, category.name, category.parent_id)


def _prepare_fields(
    row: CategoryRow,
    *,
    root_category_id: int | None,
    locale: str,
) -> CategoryFields:
    fields = row.to_fields()
    fields["locale"] = row.locale or locale
    if fields.get("parent_id") is None:
        fields["parent_id"] = root_category_id
    return fields
