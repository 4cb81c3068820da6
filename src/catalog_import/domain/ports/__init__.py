"""Domain port definitions for adapters."""

from __future__ import annotations

from .channel import ChannelSettings
from .events import BatchImportObserver
from .persistence import CategoryRepository, ImportBatchRepository
from .unit_of_work import ImportRepositories, ImportUnitOfWork

__all__ = [
    "BatchImportObserver",
    "CategoryRepository",
    "ChannelSettings",
    "ImportBatchRepository",
    "ImportRepositories",
    "ImportUnitOfWork",
]
