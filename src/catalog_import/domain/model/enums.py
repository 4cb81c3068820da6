"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class BatchState(StrEnum):
    """Lifecycle of an import batch: pending -> processing -> processed | failed."""

    PENDING = "pending"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"


class ImportErrorCode(StrEnum):
    """Machine-readable reasons a row was skipped."""

    INVALID_ATTRIBUTE = "invalid_attribute"
    DUPLICATE_SLUG = "duplicate_slug"
    PARENT_NOT_FOUND = "parent_not_found"
