"""Transaction boundary around the import repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from catalog_import.domain.ports.persistence import (
        CategoryRepository,
        ImportBatchRepository,
    )


@dataclass(slots=True)
class ImportRepositories:
    """Repositories one import transaction works with."""

    categories: CategoryRepository
    import_batches: ImportBatchRepository


@runtime_checkable
class ImportUnitOfWork(Protocol):
    """One transaction over the category tree and its import batches.

    Nothing is persisted until ``commit``. Leaving the context with an exception
    rolls back, and anything still uncommitted when the context closes is
    discarded. Callers commit at each point that must survive a later failure,
    for instance a batch marked ``processing``.
    """

    @property
    def repositories(self) -> ImportRepositories: ...

    def __enter__(self) -> ImportUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
