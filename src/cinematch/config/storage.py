"""Where cinematch keeps its SQLite database and HTTP cache."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATA_DIR_ENV: Final[str] = "CINEMATCH_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATABASE_FILENAME: Final[str] = "cinematch.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


def platform_data_home() -> Path:
    """Per-user data root: ``%LOCALAPPDATA%`` on Windows, ``$XDG_DATA_HOME`` elsewhere."""

    if sys.platform == "win32":
        configured, fallback = "LOCALAPPDATA", Path.home() / "AppData" / "Local"
    else:
        configured, fallback = "XDG_DATA_HOME", Path.home() / ".local" / "share"
    value = os.getenv(configured)
    return Path(value) if value else fallback


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    @property
    def root(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def file(self, name: str, *, create_dir: bool = True) -> Path:
        root = self.root
        if create_dir:
            root.mkdir(parents=True, exist_ok=True)
        return root / name

    def database_path(self, *, create_dir: bool = True) -> Path:
        return self.file(DATABASE_FILENAME, create_dir=create_dir)

    def http_cache_path(self, *, create_dir: bool = True) -> Path:
        return self.file(HTTP_CACHE_FILENAME, create_dir=create_dir)

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    configured = os.getenv(DATA_DIR_ENV)
    if configured:
        return StorageConfig(data_dir=Path(configured))
    return StorageConfig(data_dir=platform_data_home() / "cinematch")


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file inside the data directory."""

    uri = os.getenv(DATABASE_URI_ENV) or (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri)
