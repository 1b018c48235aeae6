"""JSON-file implementation of :class:`~backend.db.base.Store`.

Each collection lives in its own file in the data directory and holds a
single JSON array ordered by id::

    websites.json          clone_attempts.json
    code_files.json        model_benchmarks.json

Every mutation re-reads the whole collection, modifies it in memory and
rewrites it atomically (:mod:`backend.db.atomic`), all while holding the
store lock.  Two concurrent callers therefore never observe the same "next
id", and a failed write leaves the previous file in place.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, Union

from backend.config import settings
from backend.db.atomic import atomic_write_json
from backend.db.base import Store, newest_first
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
from backend.errors import IOFailure, ReferentialError, ValidationError
from backend.log import get_logger

logger = get_logger("db.file_store")

T = TypeVar("T")


def _next_id(records: list[Any]) -> int:
    return max((r.id for r in records), default=0) + 1


def _put_by_id(records: list[T], record: T) -> list[T]:
    """Replace the record sharing ``record.id`` or add it, keeping id order."""
    kept = [r for r in records if r.id != record.id]  # type: ignore[attr-defined]
    kept.append(record)
    return sorted(kept, key=lambda r: r.id)  # type: ignore[attr-defined]


class FileStore(Store):
    """Human-inspectable store for low-volume and development use."""

    WEBSITES_FILE = "websites.json"
    ATTEMPTS_FILE = "clone_attempts.json"
    CODE_FILES_FILE = "code_files.json"
    BENCHMARKS_FILE = "model_benchmarks.json"

    def __init__(self, data_dir: Optional[Union[Path, str]] = None) -> None:
        super().__init__()
        self.data_dir = Path(data_dir or settings.workspace_dir)
        self.websites_file = self.data_dir / self.WEBSITES_FILE
        self.attempts_file = self.data_dir / self.ATTEMPTS_FILE
        self.code_files_file = self.data_dir / self.CODE_FILES_FILE
        self.benchmarks_file = self.data_dir / self.BENCHMARKS_FILE
        self._ensure_files()

    # ------------------------------------------------------------------
    # Raw collection I/O
    # ------------------------------------------------------------------
    def _ensure_files(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IOFailure(f"Cannot create data directory {self.data_dir}: {exc}") from exc
        for path in (
            self.websites_file,
            self.attempts_file,
            self.code_files_file,
            self.benchmarks_file,
        ):
            if not path.exists():
                atomic_write_json(path, [])

    def _read(self, path: Path, parse: Callable[[dict[str, Any]], T]) -> list[T]:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise IOFailure(f"Cannot read {path}: {exc}") from exc

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise IOFailure(f"Corrupt collection file {path}: {exc}") from exc
        if not isinstance(raw, list):
            raise IOFailure(f"Corrupt collection file {path}: expected a JSON array")

        try:
            return [parse(item) for item in raw]
        except (KeyError, TypeError) as exc:
            raise IOFailure(f"Malformed record in {path}: {exc}") from exc

    def _write(self, path: Path, records: list[Any]) -> None:
        atomic_write_json(path, [r.to_dict() for r in records])

    def _websites(self) -> list[Website]:
        return self._read(self.websites_file, Website.from_dict)

    def _attempts(self) -> list[CloneAttempt]:
        return self._read(self.attempts_file, CloneAttempt.from_dict)

    # ------------------------------------------------------------------
    # Websites
    # ------------------------------------------------------------------
    def _insert_website(self, websites: list[Website], new: NewWebsite) -> Website:
        if any(w.url == new.url for w in websites):
            raise ValidationError(f"Website already exists: {new.url!r}")
        website = Website.from_new(_next_id(websites), new)
        self._write(self.websites_file, websites + [website])
        logger.info("website_created", website_id=website.id, url=website.url)
        return website

    def create_website(self, new: NewWebsite) -> int:
        with self._lock:
            return self._insert_website(self._websites(), new).id

    def get_or_create_website(self, new: NewWebsite) -> tuple[Website, bool]:
        with self._lock:
            websites = self._websites()
            for website in websites:
                if website.url == new.url:
                    return website, False
            return self._insert_website(websites, new), True

    def get_website(self, website_id: int) -> Optional[Website]:
        with self._lock:
            return next((w for w in self._websites() if w.id == website_id), None)

    def get_website_by_url(self, url: str) -> Optional[Website]:
        with self._lock:
            return next((w for w in self._websites() if w.url == url), None)

    def list_websites(self) -> list[Website]:
        with self._lock:
            return newest_first(self._websites(), "scraped_at")

    def upsert_website(self, website: Website) -> None:
        with self._lock:
            websites = self._websites()
            if any(w.url == website.url and w.id != website.id for w in websites):
                raise ValidationError(f"Website already exists: {website.url!r}")
            self._write(self.websites_file, _put_by_id(websites, website))

    # ------------------------------------------------------------------
    # Clone attempts
    # ------------------------------------------------------------------
    def _require_website(self, website_id: int) -> None:
        if not any(w.id == website_id for w in self._websites()):
            raise ReferentialError(f"Website not found: {website_id!r}")

    def create_clone_attempt(self, new: NewCloneAttempt) -> int:
        with self._lock:
            self._require_website(new.website_id)  # type: ignore[arg-type]
            attempts = self._attempts()
            attempt = CloneAttempt.from_new(_next_id(attempts), new)
            self._write(self.attempts_file, attempts + [attempt])
        logger.info(
            "clone_attempt_created",
            attempt_id=attempt.id,
            website_id=attempt.website_id,
            model=attempt.model_used,
            status=attempt.status,
        )
        return attempt.id

    def get_clone_attempt(self, attempt_id: int) -> Optional[CloneAttempt]:
        with self._lock:
            return next((a for a in self._attempts() if a.id == attempt_id), None)

    def list_clone_attempts(self) -> list[CloneAttempt]:
        with self._lock:
            return newest_first(self._attempts(), "created_at")

    def list_clone_attempts_by_website(self, website_id: int) -> list[CloneAttempt]:
        with self._lock:
            attempts = [a for a in self._attempts() if a.website_id == website_id]
        return newest_first(attempts, "created_at")

    def list_clone_attempts_by_model(self, model_used: str) -> list[CloneAttempt]:
        with self._lock:
            attempts = [a for a in self._attempts() if a.model_used == model_used]
        return newest_first(attempts, "created_at")

    def upsert_clone_attempt(self, attempt: CloneAttempt) -> None:
        with self._lock:
            self._require_website(attempt.website_id)
            self._write(self.attempts_file, _put_by_id(self._attempts(), attempt))

    # ------------------------------------------------------------------
    # Code files / benchmarks
    # ------------------------------------------------------------------
    def create_code_file(self, new: NewCodeFile) -> int:
        with self._lock:
            if not any(a.id == new.clone_attempt_id for a in self._attempts()):
                raise ReferentialError(f"Clone attempt not found: {new.clone_attempt_id!r}")
            files = self._read(self.code_files_file, CodeFile.from_dict)
            code_file = CodeFile.from_new(_next_id(files), new)
            self._write(self.code_files_file, files + [code_file])
            return code_file.id

    def list_code_files(self, clone_attempt_id: int) -> list[CodeFile]:
        with self._lock:
            files = self._read(self.code_files_file, CodeFile.from_dict)
        return [f for f in files if f.clone_attempt_id == clone_attempt_id]

    def record_model_benchmark(self, new: NewModelBenchmark) -> int:
        with self._lock:
            rows = self._read(self.benchmarks_file, ModelBenchmark.from_dict)
            benchmark = ModelBenchmark.from_new(_next_id(rows), new)
            self._write(self.benchmarks_file, rows + [benchmark])
            return benchmark.id

    def list_model_benchmarks(self) -> list[ModelBenchmark]:
        with self._lock:
            return self._read(self.benchmarks_file, ModelBenchmark.from_dict)

    # ------------------------------------------------------------------
    # Bulk reads
    # ------------------------------------------------------------------
    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(
                websites=tuple(self._websites()),
                attempts=tuple(self._attempts()),
            )
