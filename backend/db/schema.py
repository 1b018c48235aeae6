"""Schema initialisation for the SQLite backend.

``init_db(conn)`` is idempotent: safe to call on an existing database.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from backend.config import settings
from backend.errors import IOFailure


def _read_schema(schema_path: Optional[Path] = None) -> str:
    """Load the bundled ``schema.sql``."""
    path = schema_path or settings.schema_path
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise IOFailure(f"Cannot read schema file {path}: {exc}") from exc


def init_db(conn: sqlite3.Connection, schema_path: Optional[Path] = None) -> None:
    """Create all tables and indexes.

    This function is **idempotent**: every DDL statement uses ``IF NOT EXISTS``
    so calling it multiple times on the same database is safe.

    Args:
        conn: An open, configured SQLite connection.
        schema_path: Override the schema file (defaults to ``settings.schema_path``).
    """
    sql = _read_schema(schema_path)
    try:
        # executescript() issues an implicit COMMIT before running, which is
        # fine for a DDL-only script.
        conn.executescript(sql)
    except sqlite3.Error as exc:
        raise IOFailure(f"Schema initialisation failed: {exc}") from exc


def table_names(conn: sqlite3.Connection) -> set[str]:
    """Names of all user tables in the database."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
    ).fetchall()
    return {r[0] for r in rows}
