"""SQLAlchemy adapter package for catalog-import."""

from __future__ import annotations

from .mappings import (
    category_table,
    create_all_tables,
    import_batch_table,
    mapper_registry,
    start_mappers,
)
from .nested_set import NestedIntervals, TreeNode, compute_nested_intervals
from .repositories import SqlAlchemyCategoryRepository, SqlAlchemyImportBatchRepository
from .unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    StartupError,
    current_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "NestedIntervals",
    "SqlAlchemyCategoryRepository",
    "SqlAlchemyImportBatchRepository",
    "SqlAlchemyImportUnitOfWork",
    "StartupError",
    "TreeNode",
    "category_table",
    "compute_nested_intervals",
    "create_all_tables",
    "current_engine",
    "import_batch_table",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
