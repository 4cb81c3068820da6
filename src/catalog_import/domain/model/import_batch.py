"""Import batch records shared between the orchestrator and the reconciler."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

from catalog_import.domain.model.enums import BatchState

type Row = Mapping[str, str]


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class BatchSummary:
    created: int = 0
    updated: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"created": self.created, "updated": self.updated}

    @classmethod
    def from_dict(cls, payload: Mapping[str, int] | None) -> BatchSummary:
        if not payload:
            return cls()
        return cls(created=int(payload.get("created", 0)), updated=int(payload.get("updated", 0)))


@dataclass(eq=False, kw_only=True)
class ImportBatch:
    """A bounded, ordered group of rows processed as one unit of work.

    ``row_offset`` counts the source rows preceding this batch so rejected rows
    can be reported with their position in the source.
    """

    data: list[dict[str, str]] = field(default_factory=list[dict[str, str]])
    state: BatchState = BatchState.PENDING
    summary: dict[str, int] | None = None
    row_offset: int = 0
    created_at: datetime = field(default_factory=_utcnow)

    id: int | None = None

    @property
    def batch_summary(self) -> BatchSummary:
        return BatchSummary.from_dict(self.summary)

    def row_number(self, index: int) -> int:
        """Return the 1-based source row number of ``data[index]``."""
        return self.row_offset + index + 1
