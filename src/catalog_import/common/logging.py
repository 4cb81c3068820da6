"""Logging setup for the command line entry points."""

from __future__ import annotations

import logging
from typing import Final

# libraries that log per statement or per cell at INFO
_NOISY_LOGGERS: Final[tuple[str, ...]] = ("sqlalchemy.engine", "openpyxl")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for import runs.

    Skipped rows are logged at DEBUG; pass ``level=logging.DEBUG`` to see each one as it
    happens. ``force=True`` replaces handlers installed earlier (tests, notebooks).
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
