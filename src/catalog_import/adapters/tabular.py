"""Read category rows from CSV/TSV/XLSX files.

Every cell is read as a string; blank cells stay ``""`` rather than becoming
NaN so the validator sees exactly what the file holds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

import pandas as pd

from catalog_import.domain.importing.errors import SourceFormatError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

log = logging.getLogger(__name__)

DELIMITED_SUFFIXES: Final[dict[str, str]] = {".csv": ",", ".tsv": "\t", ".txt": "\t"}
EXCEL_SUFFIXES: Final[frozenset[str]] = frozenset({".xlsx", ".xlsm"})


@dataclass(slots=True)
class TabularSource:
    path: Path
    columns: list[str]
    rows: list[dict[str, str]] = field(default_factory=list[dict[str, str]])

    def __len__(self) -> int:
        return len(self.rows)


def read_category_source(
    path: Path,
    *,
    delimiter: str | None = None,
    encoding: str = "utf-8",
) -> TabularSource:
    """Load ``path`` into header columns and string rows."""

    if not path.exists():
        raise SourceFormatError(f"source file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix in EXCEL_SUFFIXES:
            frame = pd.read_excel(path, dtype=str, keep_default_na=False)
        elif delimiter is not None or suffix in DELIMITED_SUFFIXES:
            frame = pd.read_csv(
                path,
                sep=delimiter or DELIMITED_SUFFIXES[suffix],
                dtype=str,
                keep_default_na=False,
                encoding=encoding,
                skipinitialspace=True,
            )
        else:
            raise SourceFormatError(f"unsupported source format: {path.name}")
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise SourceFormatError(f"cannot read {path.name}: {exc}") from exc

    frame = frame.fillna("")
    frame.columns = [str(column).strip() for column in frame.columns]
    columns = list(frame.columns)
    if any(not column or column.startswith("Unnamed:") for column in columns):
        raise SourceFormatError(f"{path.name} has a column with an empty header")

    rows = [
        {str(key): "" if value is None else str(value) for key, value in record.items()}
        for record in frame.to_dict(orient="records")
    ]
    log.info("Read %s rows with %s columns from %s", len(rows), len(columns), path.name)
    return TabularSource(path=path, columns=columns, rows=rows)


def chunk_rows(
    rows: Sequence[dict[str, str]],
    batch_size: int,
) -> Iterator[tuple[int, list[dict[str, str]]]]:
    """Yield ``(offset, rows)`` slices of at most ``batch_size`` rows."""

    if batch_size < 1:
        raise ValueError("batch_size must be positive")
    for offset in range(0, len(rows), batch_size):
        yield offset, list(rows[offset : offset + batch_size])
