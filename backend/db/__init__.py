"""Database layer package.

Public re-exports so callers can write::

    from backend.db import open_store

    with open_store() as store:
        store.list_websites()
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from backend.config import settings
from backend.db.base import Store
from backend.db.file_store import FileStore
from backend.db.sqlite_store import SQLiteStore
from backend.errors import ValidationError

BACKENDS = ("file", "sqlite")


def open_store(
    backend: Optional[str] = None,
    path: Optional[Union[Path, str]] = None,
) -> Store:
    """Construct the configured :class:`Store` implementation.

    Args:
        backend: ``"file"`` or ``"sqlite"``.  Defaults to ``settings.store_backend``.
        path: Data directory for the file store, database file for SQLite.
            Defaults to the workspace locations in :mod:`backend.config`.
    """
    name = (backend or settings.store_backend).lower()
    if name == "file":
        return FileStore(path or settings.workspace_dir)
    if name == "sqlite":
        return SQLiteStore(path or settings.db_path)
    raise ValidationError(f"Unknown store backend {name!r}; expected one of {BACKENDS}")


def open_analytics_store(path: Optional[Union[Path, str]] = None) -> SQLiteStore:
    """Open the SQLite analytical copy fed by :mod:`backend.sync`."""
    return SQLiteStore(path or settings.analytics_db_path)


__all__ = [
    "BACKENDS",
    "FileStore",
    "SQLiteStore",
    "Store",
    "open_analytics_store",
    "open_store",
]
