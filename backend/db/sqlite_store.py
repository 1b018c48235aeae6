"""SQLite implementation of :class:`~backend.db.base.Store`.

Identifier allocation, URL uniqueness and parent references are enforced by
the database itself (``AUTOINCREMENT`` keys, a ``UNIQUE`` constraint and
``FOREIGN KEY`` constraints, see ``schema.sql``).  Integrity violations are
translated into the tracker's exception types.

One connection is shared by every caller; the store lock serialises access
to it, and each write runs in its own transaction (``with conn:``).
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from backend.config import settings
from backend.db.base import Store
from backend.db.connection import get_connection
from backend.db.models import (
    CloneAttempt,
    CodeFile,
    ModelBenchmark,
    NewCloneAttempt,
    NewCodeFile,
    NewModelBenchmark,
    NewWebsite,
    Snapshot,
    Website,
)
from backend.db.schema import init_db
from backend.errors import IOFailure, ReferentialError, ValidationError
from backend.log import get_logger

logger = get_logger("db.sqlite_store")

_WEBSITE_COLUMNS = (
    "url",
    "title",
    "description",
    "markdown_content",
    "html_content",
    "screenshot_url",
    "scraped_at",
    "metadata",
    "status",
)

_ATTEMPT_COLUMNS = (
    "website_id",
    "model_used",
    "provider",
    "style_selected",
    "additional_instructions",
    "generated_code",
    "sandbox_url",
    "created_at",
    "status",
    "error_message",
    "generation_time_ms",
    "component_count",
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_website(row: sqlite3.Row) -> Website:
    return Website(
        id=row["id"],
        url=row["url"],
        title=row["title"],
        description=row["description"],
        markdown_content=row["markdown_content"],
        html_content=row["html_content"],
        screenshot_url=row["screenshot_url"],
        scraped_at=row["scraped_at"],
        metadata=json.loads(row["metadata"] or "{}"),
        status=row["status"],
    )


def _row_to_attempt(row: sqlite3.Row) -> CloneAttempt:
    return CloneAttempt(
        id=row["id"],
        website_id=row["website_id"],
        model_used=row["model_used"],
        provider=row["provider"],
        style_selected=row["style_selected"],
        additional_instructions=row["additional_instructions"],
        generated_code=row["generated_code"],
        sandbox_url=row["sandbox_url"],
        created_at=row["created_at"],
        status=row["status"],
        error_message=row["error_message"],
        generation_time_ms=row["generation_time_ms"],
        code_size_bytes=row["code_size_bytes"],
        component_count=row["component_count"],
    )


def _website_values(website: Website | NewWebsite) -> tuple[Any, ...]:
    return (
        website.url,
        website.title,
        website.description,
        website.markdown_content,
        website.html_content,
        website.screenshot_url,
        website.scraped_at,
        json.dumps(website.metadata),
        website.status,
    )


def _attempt_values(attempt: CloneAttempt) -> tuple[Any, ...]:
    return tuple(getattr(attempt, col) for col in _ATTEMPT_COLUMNS)


def _upsert_sql(table: str, columns: tuple[str, ...]) -> str:
    placeholders = ", ".join("?" for _ in range(len(columns) + 1))
    updates = ", ".join(f"{col} = excluded.{col}" for col in columns)
    return (
        f"INSERT INTO {table} (id, {', '.join(columns)}) VALUES ({placeholders}) "  # noqa: S608
        f"ON CONFLICT(id) DO UPDATE SET {updates}"
    )


def _insert_sql(table: str, columns: tuple[str, ...]) -> str:
    placeholders = ", ".join("?" for _ in columns)
    return f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"  # noqa: S608


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class SQLiteStore(Store):
    """Transactional store for production volume."""

    def __init__(self, db_path: Optional[Union[Path, str]] = None) -> None:
        super().__init__()
        self.db_path = db_path or settings.db_path
        self._conn = get_connection(self.db_path)
        init_db(self._conn)

    @contextmanager
    def _guard(self, action: str) -> Iterator[sqlite3.Connection]:
        """Hold the lock and translate SQLite errors raised by *action*."""
        with self._lock:
            try:
                yield self._conn
            except sqlite3.IntegrityError as exc:
                message = str(exc)
                if "FOREIGN KEY" in message:
                    raise ReferentialError(f"{action}: referenced record does not exist") from exc
                raise ValidationError(f"{action}: {message}") from exc
            except sqlite3.Error as exc:
                logger.error("sqlite_error", action=action, error=str(exc))
                raise IOFailure(f"{action}: {exc}") from exc

    # ------------------------------------------------------------------
    # Websites
    # ------------------------------------------------------------------
    def create_website(self, new: NewWebsite) -> int:
        with self._guard("create_website") as conn:
            with conn:
                cursor = conn.execute(
                    _insert_sql("websites", _WEBSITE_COLUMNS), _website_values(new)
                )
            website_id = int(cursor.lastrowid)  # type: ignore[arg-type]
        logger.info("website_created", website_id=website_id, url=new.url)
        return website_id

    def get_or_create_website(self, new: NewWebsite) -> tuple[Website, bool]:
        with self._lock:
            existing = self.get_website_by_url(new.url)
            if existing is not None:
                return existing, False
            website_id = self.create_website(new)
            return self.get_website(website_id), True  # type: ignore[return-value]

    def get_website(self, website_id: int) -> Optional[Website]:
        with self._guard("get_website") as conn:
            row = conn.execute("SELECT * FROM websites WHERE id = ?", (website_id,)).fetchone()
        return _row_to_website(row) if row else None

    def get_website_by_url(self, url: str) -> Optional[Website]:
        with self._guard("get_website_by_url") as conn:
            row = conn.execute("SELECT * FROM websites WHERE url = ?", (url,)).fetchone()
        return _row_to_website(row) if row else None

    def list_websites(self) -> list[Website]:
        with self._guard("list_websites") as conn:
            rows = conn.execute(
                "SELECT * FROM websites ORDER BY scraped_at DESC, id DESC"
            ).fetchall()
        return [_row_to_website(r) for r in rows]

    def upsert_website(self, website: Website) -> None:
        with self._guard("upsert_website") as conn:
            with conn:
                conn.execute(
                    _upsert_sql("websites", _WEBSITE_COLUMNS),
                    (website.id, *_website_values(website)),
                )

    # ------------------------------------------------------------------
    # Clone attempts
    # ------------------------------------------------------------------
    def create_clone_attempt(self, new: NewCloneAttempt) -> int:
        # Derived fields come from the model; code_size_bytes is a generated column.
        attempt = CloneAttempt.from_new(0, new)
        with self._guard("create_clone_attempt") as conn:
            with conn:
                cursor = conn.execute(
                    _insert_sql("clone_attempts", _ATTEMPT_COLUMNS), _attempt_values(attempt)
                )
            attempt_id = int(cursor.lastrowid)  # type: ignore[arg-type]
        logger.info(
            "clone_attempt_created",
            attempt_id=attempt_id,
            website_id=attempt.website_id,
            model=attempt.model_used,
            status=attempt.status,
        )
        return attempt_id

    def get_clone_attempt(self, attempt_id: int) -> Optional[CloneAttempt]:
        with self._guard("get_clone_attempt") as conn:
            row = conn.execute(
                "SELECT * FROM clone_attempts WHERE id = ?", (attempt_id,)
            ).fetchone()
        return _row_to_attempt(row) if row else None

    def list_clone_attempts(self) -> list[CloneAttempt]:
        with self._guard("list_clone_attempts") as conn:
            rows = conn.execute(
                "SELECT * FROM clone_attempts ORDER BY created_at DESC, id DESC"
            ).fetchall()
        return [_row_to_attempt(r) for r in rows]

    def list_clone_attempts_by_website(self, website_id: int) -> list[CloneAttempt]:
        with self._guard("list_clone_attempts_by_website") as conn:
            rows = conn.execute(
                "SELECT * FROM clone_attempts WHERE website_id = ? "
                "ORDER BY created_at DESC, id DESC",
                (website_id,),
            ).fetchall()
        return [_row_to_attempt(r) for r in rows]

    def list_clone_attempts_by_model(self, model_used: str) -> list[CloneAttempt]:
        with self._guard("list_clone_attempts_by_model") as conn:
            rows = conn.execute(
                "SELECT * FROM clone_attempts WHERE model_used = ? "
                "ORDER BY created_at DESC, id DESC",
                (model_used,),
            ).fetchall()
        return [_row_to_attempt(r) for r in rows]

    def upsert_clone_attempt(self, attempt: CloneAttempt) -> None:
        with self._guard("upsert_clone_attempt") as conn:
            with conn:
                conn.execute(
                    _upsert_sql("clone_attempts", _ATTEMPT_COLUMNS),
                    (attempt.id, *_attempt_values(attempt)),
                )

    # ------------------------------------------------------------------
    # Code files / benchmarks
    # ------------------------------------------------------------------
    def create_code_file(self, new: NewCodeFile) -> int:
        with self._guard("create_code_file") as conn:
            with conn:
                cursor = conn.execute(
                    """
                    INSERT INTO code_files (clone_attempt_id, file_path, file_content, file_type, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        new.clone_attempt_id,
                        new.file_path,
                        new.file_content,
                        new.file_type,
                        new.created_at,
                    ),
                )
            return int(cursor.lastrowid)  # type: ignore[arg-type]

    def list_code_files(self, clone_attempt_id: int) -> list[CodeFile]:
        with self._guard("list_code_files") as conn:
            rows = conn.execute(
                "SELECT * FROM code_files WHERE clone_attempt_id = ? ORDER BY id",
                (clone_attempt_id,),
            ).fetchall()
        return [CodeFile.from_dict(dict(r)) for r in rows]

    def record_model_benchmark(self, new: NewModelBenchmark) -> int:
        with self._guard("record_model_benchmark") as conn:
            with conn:
                cursor = conn.execute(
                    """
                    INSERT INTO model_benchmarks (
                        model_name, provider, model_size, hardware_specs, website_complexity,
                        avg_generation_time_ms, avg_code_quality_score, success_rate,
                        avg_user_satisfaction, total_attempts, benchmark_date, notes
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        new.model_name,
                        new.provider,
                        new.model_size,
                        json.dumps(new.hardware_specs),
                        new.website_complexity,
                        new.avg_generation_time_ms,
                        new.avg_code_quality_score,
                        new.success_rate,
                        new.avg_user_satisfaction,
                        new.total_attempts,
                        new.benchmark_date,
                        new.notes,
                    ),
                )
            return int(cursor.lastrowid)  # type: ignore[arg-type]

    def list_model_benchmarks(self) -> list[ModelBenchmark]:
        with self._guard("list_model_benchmarks") as conn:
            rows = conn.execute("SELECT * FROM model_benchmarks ORDER BY id").fetchall()
        result: list[ModelBenchmark] = []
        for row in rows:
            data = dict(row)
            data["hardware_specs"] = json.loads(data["hardware_specs"] or "{}")
            result.append(ModelBenchmark.from_dict(data))
        return result

    # ------------------------------------------------------------------
    # Bulk reads
    # ------------------------------------------------------------------
    def snapshot(self) -> Snapshot:
        with self._guard("snapshot") as conn:
            websites = conn.execute("SELECT * FROM websites ORDER BY id").fetchall()
            attempts = conn.execute("SELECT * FROM clone_attempts ORDER BY id").fetchall()
        return Snapshot(
            websites=tuple(_row_to_website(r) for r in websites),
            attempts=tuple(_row_to_attempt(r) for r in attempts),
        )

    def close(self) -> None:
        with self._lock:
            self._conn.close()
