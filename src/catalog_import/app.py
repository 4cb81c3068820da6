"""Application orchestration entry points."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from catalog_import.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    is_started,
    startup,
)
from catalog_import.adapters.tabular import chunk_rows, read_category_source
from catalog_import.config import get_channel_config, get_import_config
from catalog_import.domain.importing import (
    BatchImportResult,
    BatchNotFoundError,
    CategoryBatchReconciler,
    CategoryLookupCache,
    RowValidator,
    SkipRecord,
    SkipReport,
    SourceFormatError,
    ValidationSummary,
    ignored_columns,
    missing_required_columns,
    validate_rows,
)
from catalog_import.domain.model import BatchState, ImportBatch

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from catalog_import.adapters.tabular import TabularSource
    from catalog_import.config import ChannelConfig, ImportConfig
    from catalog_import.domain.ports import BatchImportObserver
    from catalog_import.domain.ports.unit_of_work import ImportUnitOfWork

type UnitOfWorkFactory = Callable[[], ImportUnitOfWork]


log = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportRunResult:
    """Outcome of importing one source file."""

    batches: list[BatchImportResult] = field(default_factory=list[BatchImportResult])
    skipped: tuple[SkipRecord, ...] = ()
    pending_batches: list[int] = field(default_factory=list[int])
    aborted: bool = False

    @property
    def created(self) -> int:
        return sum(result.created for result in self.batches)

    @property
    def updated(self) -> int:
        return sum(result.updated for result in self.batches)


class LoggingBatchObserver:
    """Report batch lifecycle notifications through the module logger."""

    def before_batch_import(self, batch: ImportBatch) -> None:
        log.info("Importing batch %s (%s rows)", batch.id, len(batch.data))

    def after_batch_import(self, batch: ImportBatch) -> None:
        summary = batch.batch_summary
        log.info(
            "Finished batch %s: state=%s, created=%s, updated=%s",
            batch.id,
            batch.state,
            summary.created,
            summary.updated,
        )


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyImportUnitOfWork


def _load_source(path: Path) -> TabularSource:
    source = read_category_source(path)
    missing = missing_required_columns(source.columns)
    if missing:
        raise SourceFormatError(
            f"{path.name} is missing required columns: {', '.join(missing)}"
        )
    ignored = ignored_columns(source.columns)
    if ignored:
        log.warning("Ignoring unknown columns in %s: %s", path.name, ", ".join(ignored))
    return source


def import_category_file(
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    channel: ChannelConfig | None = None,
    import_config: ImportConfig | None = None,
    observers: Sequence[BatchImportObserver] | None = None,
) -> ImportRunResult:
    """Import a category source file batch by batch.

    Batches run one after another; stop scheduling new batches once the number
    of skipped rows exceeds the allowed errors. Unprocessed batches stay pending.
    """

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    effective_channel = channel or get_channel_config()
    effective_config = import_config or get_import_config()
    effective_observers = (LoggingBatchObserver(),) if observers is None else tuple(observers)

    source = _load_source(path)
    log.info(
        "Starting category import: file=%s, rows=%s, batch_size=%s, allowed_errors=%s",
        path.name,
        len(source),
        effective_config.batch_size,
        effective_config.allowed_errors,
    )

    batch_ids = create_import_batches(
        source.rows,
        batch_size=effective_config.batch_size,
        unit_of_work_factory=effective_uow,
    )

    report = SkipReport(allowed_errors=effective_config.allowed_errors)
    result = ImportRunResult()
    for position, batch_id in enumerate(batch_ids):
        if report.is_error_limit_exceeded():
            result.aborted = True
            result.pending_batches = batch_ids[position:]
            log.warning(
                "Error limit exceeded (%s > %s); leaving %s batches pending",
                report.error_count,
                report.allowed_errors,
                len(result.pending_batches),
            )
            break
        result.batches.append(
            process_import_batch(
                batch_id,
                unit_of_work_factory=effective_uow,
                channel=effective_channel,
                report=report,
                observers=effective_observers,
            )
        )

    result.skipped = report.records
    log.info(
        "Finished category import: created=%s, updated=%s, skipped=%s, aborted=%s",
        result.created,
        result.updated,
        len(result.skipped),
        result.aborted,
    )
    return result


def create_import_batches(
    rows: Sequence[dict[str, str]],
    *,
    batch_size: int,
    unit_of_work_factory: UnitOfWorkFactory,
) -> list[int]:
    """Persist ``rows`` as pending batches and return their ids in order."""

    batches: list[ImportBatch] = []
    with unit_of_work_factory() as uow:
        for offset, chunk in chunk_rows(rows, batch_size):
            batch = ImportBatch(data=chunk, row_offset=offset)
            uow.repositories.import_batches.add(batch)
            batches.append(batch)
        uow.commit()
    return [batch.id for batch in batches if batch.id is not None]


def process_import_batch(
    batch_id: int,
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    channel: ChannelConfig,
    report: SkipReport | None = None,
    observers: Sequence[BatchImportObserver] = (),
) -> BatchImportResult:
    """Run one stored batch through the reconciler inside its own unit of work.

    A fatal error marks the batch failed and propagates.
    """

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        batch = repositories.import_batches.get(batch_id)
        if batch is None:
            raise BatchNotFoundError(f"Import batch {batch_id} does not exist")
        repositories.import_batches.update_batch(batch_id, state=BatchState.PROCESSING)
        uow.commit()

        reconciler = CategoryBatchReconciler(
            categories=repositories.categories,
            batches=repositories.import_batches,
            channel=channel,
            report=report,
            observers=observers,
        )
        try:
            result = reconciler.import_batch(batch)
            uow.commit()
        except Exception:
            log.exception("Import of batch %s failed", batch_id)
            uow.rollback()
            repositories.import_batches.update_batch(batch_id, state=BatchState.FAILED)
            uow.commit()
            raise
    return result


def validate_category_file(
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    import_config: ImportConfig | None = None,
) -> tuple[ValidationSummary, tuple[SkipRecord, ...]]:
    """Check a source file against the current tree without writing anything.

    Slugs must be unique across the whole file here, not only per batch.
    """

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    effective_config = import_config or get_import_config()
    source = _load_source(path)
    report = SkipReport(allowed_errors=effective_config.allowed_errors)

    with effective_uow() as uow:
        categories = uow.repositories.categories
        cache = CategoryLookupCache(categories)
        cache.init()
        validator = RowValidator(cache=cache, categories=categories, report=report)
        summary = validate_rows(source.rows, validator)

    if report.is_error_limit_exceeded():
        log.warning(
            "Validation found %s errors, more than the %s allowed",
            report.error_count,
            report.allowed_errors,
        )
    return summary, report.records
