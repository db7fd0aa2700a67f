"""Where the registry database and the HTTP cache live on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "masterdata"
DATA_DIR_ENV: Final[str] = "MASTERDATA_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
REGISTRY_DB_FILENAME: Final[str] = "masterdata.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Files kept under one data directory.

    ``registry_db`` holds turbines and sites; ``http_cache`` backs the cached
    DAWA and OIS responses when a client is configured with the sqlite backend.
    """

    data_dir: Path

    def _file(self, name: str, *, ensure: bool) -> Path:
        base = self.data_dir.expanduser().resolve()
        if ensure:
            base.mkdir(parents=True, exist_ok=True)
        return base / name

    def registry_db(self, *, ensure: bool = True) -> Path:
        return self._file(REGISTRY_DB_FILENAME, ensure=ensure)

    def http_cache(self, *, ensure: bool = True) -> Path:
        return self._file(HTTP_CACHE_FILENAME, ensure=ensure)


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    override = os.getenv(DATA_DIR_ENV)
    data_dir = Path(override) if override else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""

    uri = os.getenv(DATABASE_URI_ENV)
    if uri:
        return DatabaseConfig(uri=uri)
    registry_db = (storage or get_storage_config()).registry_db()
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{registry_db}")


def get_http_cache_path() -> Path:
    return get_storage_config().http_cache()
