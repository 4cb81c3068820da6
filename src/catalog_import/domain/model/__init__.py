"""Domain model for the category import."""

from __future__ import annotations

from .category import Category, CategorySummary
from .enums import BatchState, ImportErrorCode
from .import_batch import BatchSummary, ImportBatch, Row

__all__ = [
    "BatchState",
    "BatchSummary",
    "Category",
    "CategorySummary",
    "ImportBatch",
    "ImportErrorCode",
    "Row",
]
