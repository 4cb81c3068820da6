"""Application configuration helpers."""

from __future__ import annotations

from catalog_import.common.logging import configure_logging

from .channel import DEFAULT_LOCALE, ChannelConfig, get_channel_config
from .env import optional_env_var, optional_int_env_var
from .errors import ConfigurationError
from .importing import (
    DEFAULT_ALLOWED_ERRORS,
    DEFAULT_BATCH_SIZE,
    ImportConfig,
    get_import_config,
)
from .storage import StorageConfig, get_database_uri, get_storage_config

__all__ = [
    "DEFAULT_ALLOWED_ERRORS",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_LOCALE",
    "ChannelConfig",
    "ConfigurationError",
    "ImportConfig",
    "StorageConfig",
    "configure_logging",
    "get_channel_config",
    "get_database_uri",
    "get_import_config",
    "get_storage_config",
    "optional_env_var",
    "optional_int_env_var",
]
