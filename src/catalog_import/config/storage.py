"""Where the category store lives.

``DATABASE_URI`` wins when set. Otherwise the store is a SQLite file inside the
data directory, ``CATALOG_IMPORT_DATA_DIR`` or the per-user data location.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "catalog-import"
DEFAULT_DB_FILENAME: Final[str] = "catalog.db"


def _user_data_root() -> Path:
    if os.name == "nt":
        local_app_data = optional_env_var("LOCALAPPDATA")
        return Path(local_app_data) if local_app_data else Path.home() / "AppData" / "Local"
    xdg_data_home = optional_env_var("XDG_DATA_HOME")
    return Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    @property
    def database_path(self) -> Path:
        return self.data_dir.expanduser().resolve() / self.database_filename

    def sqlite_uri(self, *, create_dir: bool = True) -> str:
        path = self.database_path
        if create_dir:
            path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{path}"


def get_storage_config() -> StorageConfig:
    data_dir = optional_env_var("CATALOG_IMPORT_DATA_DIR")
    return StorageConfig(data_dir=Path(data_dir) if data_dir else _user_data_root() / APP_DIR_NAME)


def get_database_uri(*, storage: StorageConfig | None = None) -> str:
    """Return the SQLAlchemy URL of the category store."""

    override = optional_env_var("DATABASE_URI")
    if override is not None:
        return override
    return (storage or get_storage_config()).sqlite_uri()
