"""Lifecycle notifications emitted around a batch import."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from catalog_import.domain.model import ImportBatch


@runtime_checkable
class BatchImportObserver(Protocol):
    """Observer notified before and after a batch is imported.

    Observers see the batch being imported but must not mutate ``batch.data``;
    they have no influence on the outcome of the batch.
    """

    def before_batch_import(self, batch: ImportBatch) -> None: ...

    def after_batch_import(self, batch: ImportBatch) -> None: ...
