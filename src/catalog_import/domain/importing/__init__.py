"""Validation and reconciliation of category import batches."""

from __future__ import annotations

from .cache import CacheEntry, CategoryLookupCache
from .errors import (
    BatchNotFoundError,
    CatalogImportError,
    CategoryNotFoundError,
    SkipRecord,
    SkipReport,
    SourceFormatError,
)
from .reconciler import BatchImportResult, CategoryBatchReconciler
from .rows import (
    MAX_STORED_INT,
    MIN_STORED_INT,
    OPTIONAL_COLUMN_NAMES,
    REQUIRED_COLUMN_NAMES,
    VALID_COLUMN_NAMES,
    CategoryFields,
    CategoryRow,
    ignored_columns,
    missing_required_columns,
    parse_category_id,
)
from .validator import RowValidator, ValidationSummary, validate_rows

__all__ = [
    "MAX_STORED_INT",
    "MIN_STORED_INT",
    "OPTIONAL_COLUMN_NAMES",
    "REQUIRED_COLUMN_NAMES",
    "VALID_COLUMN_NAMES",
    "BatchImportResult",
    "BatchNotFoundError",
    "CacheEntry",
    "CatalogImportError",
    "CategoryBatchReconciler",
    "CategoryFields",
    "CategoryLookupCache",
    "CategoryNotFoundError",
    "CategoryRow",
    "RowValidator",
    "SkipRecord",
    "SkipReport",
    "SourceFormatError",
    "ValidationSummary",
    "ignored_columns",
    "missing_required_columns",
    "parse_category_id",
    "validate_rows",
]
