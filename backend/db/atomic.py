"""Atomic file writes for the JSON-backed store.

Data is written to a temporary file in the target's directory, flushed to
disk, then renamed over the target.  A failure at any point leaves the
previous file untouched.
"""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, TextIO

from backend.errors import IOFailure
from backend.log import get_logger

logger = get_logger("db.atomic")


@contextmanager
def atomic_write(path: Path, encoding: str = "utf-8") -> Generator[TextIO, None, None]:
    """Context manager yielding a text handle whose contents replace *path*.

    Raises:
        IOFailure: If writing, syncing or renaming fails.

    Example::

        with atomic_write(Path("websites.json")) as f:
            json.dump(records, f)
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
    except OSError as exc:
        raise IOFailure(f"Cannot create temporary file for {path}: {exc}") from exc

    temp_path = Path(temp_name)
    success = False
    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        temp_path.replace(path)
        success = True
        logger.debug("atomic_write_success", path=str(path))
    except (OSError, TypeError, ValueError) as exc:
        logger.error("atomic_write_failed", path=str(path), error=str(exc))
        raise IOFailure(f"Failed to atomically write {path}: {exc}") from exc
    finally:
        if not success and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass


def atomic_write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Atomically replace *path* with *data* serialised as JSON."""
    with atomic_write(path) as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)
