from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from catalog_import.domain.importing import (
    CategoryBatchReconciler,
    CategoryLookupCache,
    SkipReport,
)
from catalog_import.domain.model import BatchState, Category, ImportBatch, ImportErrorCode
from tests.helpers.categories import (
    FakeCategoryRepository,
    FakeChannel,
    FakeImportBatchRepository,
    RecordingObserver,
    make_row,
    persisted_batch,
)

if TYPE_CHECKING:
    from catalog_import.domain.importing import CategoryFields


def _reconciler(
    categories: FakeCategoryRepository,
    batches: FakeImportBatchRepository,
    *,
    channel: FakeChannel | None = None,
    observers: tuple[RecordingObserver, ...] = (),
    report: SkipReport | None = None,
) -> CategoryBatchReconciler:
    return CategoryBatchReconciler(
        categories=categories,
        batches=batches,
        channel=channel or FakeChannel(),
        report=report,
        observers=observers,
    )


def test_imports_batch_with_intra_batch_parent_and_duplicate() -> None:
    categories = FakeCategoryRepository()
    batches = FakeImportBatchRepository()
    batch = persisted_batch(
        [
            make_row("a", name="A"),
            make_row("b", name="B", parent_id="1"),
            make_row("a", name="A2"),
        ],
        batches,
    )

    result = _reconciler(categories, batches).import_batch(batch)

    assert result.created == 2
    assert result.updated == 0
    assert result.success
    assert [(record.row_number, record.error_code) for record in result.skipped] == [
        (3, ImportErrorCode.DUPLICATE_SLUG)
    ]
    a = categories.find_by_slug("a")
    b = categories.find_by_slug("b")
    assert a is not None
    assert b is not None
    assert a.name == "A"
    assert a.parent_id is None
    assert b.parent_id == a.id
    assert batch.state is BatchState.PROCESSED
    assert batch.summary == {"created": 2, "updated": 0}


def test_reimporting_same_rows_updates_instead_of_creating() -> None:
    categories = FakeCategoryRepository()
    batches = FakeImportBatchRepository()
    rows = [make_row("a"), make_row("b", parent_id="1")]

    first = _reconciler(categories, batches).import_batch(persisted_batch(rows, batches))
    second = _reconciler(categories, batches).import_batch(persisted_batch(rows, batches))

    assert (first.created, first.updated) == (2, 0)
    assert (second.created, second.updated) == (0, 2)
    assert len(categories.items) == 2


def test_update_keeps_columns_absent_from_row() -> None:
    categories = FakeCategoryRepository(
        [Category(slug="a", name="A", description="Kept", meta_title="Old title")]
    )
    batches = FakeImportBatchRepository()
    batch = persisted_batch([make_row("a", name="Renamed", meta_title="New title")], batches)

    _reconciler(categories, batches).import_batch(batch)

    stored = categories.find_by_slug("a")
    assert stored is not None
    assert stored.name == "Renamed"
    assert stored.description == "Kept"
    assert stored.meta_title == "New title"


def test_rows_without_parent_attach_to_channel_root() -> None:
    categories = FakeCategoryRepository([Category(slug="root", name="Root")])
    batches = FakeImportBatchRepository()
    batch = persisted_batch([make_row("shoes"), make_row("hats", parent_id="0")], batches)

    _reconciler(categories, batches, channel=FakeChannel(root_category_id=1)).import_batch(batch)

    shoes = categories.find_by_slug("shoes")
    hats = categories.find_by_slug("hats")
    assert shoes is not None
    assert hats is not None
    assert shoes.parent_id == 1
    assert hats.parent_id == 1


def test_locale_falls_back_to_channel_locale() -> None:
    categories = FakeCategoryRepository()
    batches = FakeImportBatchRepository()
    batch = persisted_batch(
        [make_row("shoes"), make_row("hats", locale="fr"), make_row("caps", locale="")],
        batches,
    )

    _reconciler(categories, batches, channel=FakeChannel(locale="de")).import_batch(batch)

    assert {item.slug: item.locale for item in categories.items.values()} == {
        "shoes": "de",
        "hats": "fr",
        "caps": "de",
    }


def test_optional_columns_written_when_present_even_if_blank() -> None:
    categories = FakeCategoryRepository(
        [Category(slug="shoes", name="Shoes", logo_path="shoes.png", banner_path="banner.png")]
    )
    batches = FakeImportBatchRepository()
    batch = persisted_batch(
        [make_row("shoes", display_mode="products_only", logo_path="")],
        batches,
    )

    _reconciler(categories, batches).import_batch(batch)

    stored = categories.find_by_slug("shoes")
    assert stored is not None
    assert stored.display_mode == "products_only"
    assert stored.logo_path == ""
    assert stored.banner_path == "banner.png"


def test_rebuild_runs_once_after_all_rows() -> None:
    categories = FakeCategoryRepository()
    batches = FakeImportBatchRepository()
    batch = persisted_batch([make_row("a"), make_row("b"), make_row("c")], batches)

    _reconciler(categories, batches).import_batch(batch)

    assert categories.rebuild_calls == 1
    assert categories.writes[-1] == ("rebuild", "")
    assert [kind for kind, _ in categories.writes].count("create") == 3


def test_rebuild_runs_even_when_every_row_is_skipped() -> None:
    categories = FakeCategoryRepository()
    batches = FakeImportBatchRepository()
    batch = persisted_batch([make_row("a", status="x")], batches)

    result = _reconciler(categories, batches).import_batch(batch)

    assert categories.rebuild_calls == 1
    assert (result.created, result.updated) == (0, 0)
    assert batch.state is BatchState.PROCESSED


def test_observers_notified_around_processing() -> None:
    categories = FakeCategoryRepository()
    batches = FakeImportBatchRepository()
    events: list[str] = []
    first = RecordingObserver(events)
    second = RecordingObserver(events)
    batch = persisted_batch([make_row("a")], batches)

    _reconciler(categories, batches, observers=(first, second)).import_batch(batch)

    assert events == [
        "before:1",
        "before:1",
        "after:1:processed",
        "after:1:processed",
    ]


def test_skip_records_use_source_row_numbers() -> None:
    categories = FakeCategoryRepository()
    batches = FakeImportBatchRepository()
    batch = persisted_batch([make_row("a"), make_row("a")], batches, row_offset=100)

    result = _reconciler(categories, batches).import_batch(batch)

    assert [record.row_number for record in result.skipped] == [102]


def test_shared_report_collects_across_batches() -> None:
    categories = FakeCategoryRepository()
    batches = FakeImportBatchRepository()
    report = SkipReport()
    reconciler = _reconciler(categories, batches, report=report)

    first = reconciler.import_batch(persisted_batch([make_row("a"), make_row("a")], batches))
    second = reconciler.import_batch(
        persisted_batch([make_row("a"), make_row("b", parent_id="9")], batches, row_offset=2)
    )

    assert len(first.skipped) == 1
    assert [record.error_code for record in second.skipped] == [
        ImportErrorCode.PARENT_NOT_FOUND
    ]
    assert report.error_count == 2


def test_duplicate_tracking_resets_between_batches() -> None:
    categories = FakeCategoryRepository()
    batches = FakeImportBatchRepository()
    reconciler = _reconciler(categories, batches)

    reconciler.import_batch(persisted_batch([make_row("a")], batches))
    result = reconciler.import_batch(persisted_batch([make_row("a")], batches))

    assert result.skipped == ()
    assert result.updated == 1


def test_cache_tracks_written_categories() -> None:
    categories = FakeCategoryRepository()
    batches = FakeImportBatchRepository()
    cache = CategoryLookupCache(categories)
    reconciler = CategoryBatchReconciler(
        categories=categories,
        batches=batches,
        channel=FakeChannel(),
        cache=cache,
    )

    reconciler.import_batch(persisted_batch([make_row("a", name="A")], batches))

    entry = cache.get("a")
    assert entry is not None
    assert entry.id == 1
    assert entry.name == "A"


def test_unpersisted_batch_is_rejected() -> None:
    reconciler = _reconciler(FakeCategoryRepository(), FakeImportBatchRepository())

    with pytest.raises(ValueError, match="persisted"):
        reconciler.import_batch(ImportBatch(data=[make_row("a")]))


def test_store_errors_propagate_without_finishing_batch() -> None:
    class FailingRepository(FakeCategoryRepository):
        def create(self, fields: CategoryFields) -> Category:
            _ = fields
            raise RuntimeError("store unavailable")

    categories = FailingRepository()
    batches = FakeImportBatchRepository()
    batch = persisted_batch([make_row("a")], batches)

    with pytest.raises(RuntimeError, match="store unavailable"):
        _reconciler(categories, batches).import_batch(batch)

    assert batch.state is BatchState.PENDING
    assert categories.rebuild_calls == 0
