"""Batching defaults for import runs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_int_env_var
from .errors import ConfigurationError

DEFAULT_BATCH_SIZE = 100
DEFAULT_ALLOWED_ERRORS = 10


@dataclass(frozen=True, slots=True)
class ImportConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    allowed_errors: int = DEFAULT_ALLOWED_ERRORS

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ConfigurationError("batch size must be a positive integer", setting="batch_size")
        if self.allowed_errors < 0:
            raise ConfigurationError("allowed errors must not be negative", setting="allowed_errors")


def get_import_config(
    *,
    batch_size: int | None = None,
    allowed_errors: int | None = None,
) -> ImportConfig:
    if batch_size is None:
        batch_size = optional_int_env_var("CATALOG_IMPORT_BATCH_SIZE")
    if allowed_errors is None:
        allowed_errors = optional_int_env_var("CATALOG_IMPORT_ALLOWED_ERRORS")
    return ImportConfig(
        batch_size=DEFAULT_BATCH_SIZE if batch_size is None else batch_size,
        allowed_errors=DEFAULT_ALLOWED_ERRORS if allowed_errors is None else allowed_errors,
    )
