"""The ``Store`` interface shared by every persistence backend.

Two implementations conform to it:

* :class:`~backend.db.file_store.FileStore`: JSON files, one per collection.
* :class:`~backend.db.sqlite_store.SQLiteStore`: a transactional SQLite DB.

Callers depend on this interface only; :func:`backend.db.open_store` picks the
implementation.  Every public operation acquires the store's own lock, so a
store object may be shared between threads.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, Optional

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


def newest_first(records: list[Any], key: str) -> list[Any]:
    """Sort records by timestamp attribute *key*, newest first (ties: higher id)."""
    return sorted(records, key=lambda r: (getattr(r, key), r.id), reverse=True)


class Store(ABC):
    """Durable storage for websites, clone attempts and their satellites."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Websites
    # ------------------------------------------------------------------
    @abstractmethod
    def create_website(self, new: NewWebsite) -> int:
        """Persist a new website and return its id.

        Raises:
            ValidationError: If a website with the same URL already exists.
            IOFailure: If the durable write fails.
        """

    @abstractmethod
    def get_or_create_website(self, new: NewWebsite) -> tuple[Website, bool]:
        """Return the website for ``new.url``, creating it if absent.

        The lookup and the insert happen inside one critical section.  The
        boolean is ``True`` when a record was created.
        """

    @abstractmethod
    def get_website(self, website_id: int) -> Optional[Website]:
        """Fetch a website by id.  Returns ``None`` if not found."""

    @abstractmethod
    def get_website_by_url(self, url: str) -> Optional[Website]:
        """Exact-match lookup by URL.  Returns ``None`` if not found."""

    @abstractmethod
    def list_websites(self) -> list[Website]:
        """All websites, most recently scraped first."""

    @abstractmethod
    def upsert_website(self, website: Website) -> None:
        """Insert *website* with its own id, or overwrite the record with that id."""

    # ------------------------------------------------------------------
    # Clone attempts
    # ------------------------------------------------------------------
    @abstractmethod
    def create_clone_attempt(self, new: NewCloneAttempt) -> int:
        """Persist a new attempt and return its id.

        Derived fields are computed here from ``new``.

        Raises:
            ReferentialError: If ``new.website_id`` does not exist.
            IOFailure: If the durable write fails.
        """

    @abstractmethod
    def get_clone_attempt(self, attempt_id: int) -> Optional[CloneAttempt]:
        """Fetch an attempt by id.  Returns ``None`` if not found."""

    @abstractmethod
    def list_clone_attempts(self) -> list[CloneAttempt]:
        """All attempts, newest first."""

    @abstractmethod
    def list_clone_attempts_by_website(self, website_id: int) -> list[CloneAttempt]:
        """Attempts against *website_id*, newest first."""

    @abstractmethod
    def list_clone_attempts_by_model(self, model_used: str) -> list[CloneAttempt]:
        """Attempts made with *model_used*, newest first."""

    @abstractmethod
    def upsert_clone_attempt(self, attempt: CloneAttempt) -> None:
        """Insert *attempt* with its own id, or overwrite the record with that id.

        Raises:
            ReferentialError: If the referenced website is missing.
        """

    # ------------------------------------------------------------------
    # Code files / benchmarks
    # ------------------------------------------------------------------
    @abstractmethod
    def create_code_file(self, new: NewCodeFile) -> int:
        """Persist a generated file belonging to an attempt and return its id."""

    @abstractmethod
    def list_code_files(self, clone_attempt_id: int) -> list[CodeFile]:
        """Files of one attempt, in insertion order."""

    @abstractmethod
    def record_model_benchmark(self, new: NewModelBenchmark) -> int:
        """Persist a benchmark row and return its id."""

    @abstractmethod
    def list_model_benchmarks(self) -> list[ModelBenchmark]:
        """All benchmark rows, in insertion order."""

    # ------------------------------------------------------------------
    # Bulk reads
    # ------------------------------------------------------------------
    @abstractmethod
    def snapshot(self) -> Snapshot:
        """Consistent copy of websites and attempts, in id order."""

    def export_data(self) -> dict[str, list[dict[str, Any]]]:
        """Return the full raw dataset as plain dicts."""
        snap = self.snapshot()
        return {
            "websites": [w.to_dict() for w in snap.websites],
            "attempts": [a.to_dict() for a in snap.attempts],
        }

    def close(self) -> None:
        """Release any resources held by the store."""

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
