"""Ports for persisting categories and import batches."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from catalog_import.domain.importing.rows import CategoryFields
    from catalog_import.domain.model import (
        BatchState,
        BatchSummary,
        Category,
        CategorySummary,
        ImportBatch,
    )


@runtime_checkable
class CategoryRepository(Protocol):
    """Persistence contract for the category tree.

    ``rebuild_tree`` recomputes the nested-interval encoding of the whole tree.
    It is not safe to run two batches against the same tree concurrently: both
    may pass parent checks for categories the other is about to write, and two
    interleaved rebuilds leave the encoding inconsistent. Callers serialise
    batch execution per tree.
    """

    def find_by_id(self, category_id: int) -> Category | None: ...

    def find_by_slug(self, slug: str) -> Category | None: ...

    def create(self, fields: CategoryFields) -> Category: ...

    def update(self, category_id: int, fields: CategoryFields) -> Category: ...

    def list_all(self) -> Sequence[CategorySummary]: ...

    def list_by_slugs(self, slugs: Collection[str]) -> Sequence[CategorySummary]: ...

    def rebuild_tree(self) -> None: ...


@runtime_checkable
class ImportBatchRepository(Protocol):
    """Persistence contract for import batches."""

    def add(self, batch: ImportBatch) -> None: ...

    def get(self, batch_id: int) -> ImportBatch | None: ...

    def update_batch(
        self,
        batch_id: int,
        *,
        state: BatchState,
        summary: BatchSummary | None = None,
    ) -> None: ...
