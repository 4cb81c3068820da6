from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from catalog_import.app import import_category_file, validate_category_file
from catalog_import.config import (
    ConfigurationError,
    configure_logging,
    get_channel_config,
    get_import_config,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from catalog_import.domain.importing import SkipRecord

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import catalog data")
    subparsers = parser.add_subparsers(dest="command", required=True)

    categories = subparsers.add_parser("categories", help="Import a category source file")
    categories.add_argument(
        "path",
        type=Path,
        help="CSV, TSV or XLSX file with one category per row",
    )
    categories.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Number of rows per import batch (defaults to config)",
    )
    categories.add_argument(
        "--allowed-errors",
        type=int,
        default=None,
        help="Number of skipped rows tolerated before remaining batches are left pending",
    )
    categories.add_argument(
        "--root-category-id",
        type=int,
        help="Category id used as parent for rows without a parent_id",
    )
    categories.add_argument(
        "--locale",
        type=str,
        help="Locale stored on rows that do not carry one",
    )
    categories.add_argument(
        "--validate-only",
        action="store_true",
        help="Check the file against the current tree without writing",
    )

    return parser.parse_args(list(argv))


def _log_skipped(records: Sequence[SkipRecord]) -> None:
    for record in records:
        log.warning(
            "Row %s skipped (%s, column=%s): %s",
            record.row_number,
            record.error_code,
            record.column_name or "-",
            record.message,
        )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        import_config = get_import_config(
            batch_size=parsed_args.batch_size,
            allowed_errors=parsed_args.allowed_errors,
        )
        channel = get_channel_config(
            root_category_id=parsed_args.root_category_id,
            locale=parsed_args.locale,
        )
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.validate_only:
            summary, skipped = validate_category_file(parsed_args.path, import_config=import_config)
            _log_skipped(skipped)
            log.info(
                "Validation finished: rows=%s, valid=%s, invalid=%s, errors=%s",
                summary.processed_rows,
                summary.valid_rows,
                summary.invalid_rows,
                summary.error_count,
            )
        else:
            result = import_category_file(
                parsed_args.path,
                channel=channel,
                import_config=import_config,
            )
            _log_skipped(result.skipped)
            log.info(
                "Category import finished: batches=%s, created=%s, updated=%s, skipped=%s",
                len(result.batches),
                result.created,
                result.updated,
                len(result.skipped),
            )
            if result.aborted:
                log.warning(
                    "Import stopped after too many errors; batches %s remain pending",
                    ", ".join(str(batch_id) for batch_id in result.pending_batches),
                )
    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
