"""Centralised settings for the clone-tracker backend.

Every field defaults from an environment variable; a `.env` file next to
the `backend/` package is read on import and never overrides variables that
are already set.  See `.env.example` for the full list of keys.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("CLONE_TRACKER_WORKSPACE", Path.home() / ".clone_tracker")
        ).expanduser()
    )
    store_backend: str = field(
        default_factory=lambda: os.environ.get("STORE_BACKEND", "file")
    )
    primary_db_name: str = field(
        default_factory=lambda: os.environ.get("PRIMARY_DB_NAME", "clone_tracker.db")
    )
    analytics_db_name: str = field(
        default_factory=lambda: os.environ.get(
            "ANALYTICS_DB_NAME", "clone_tracker_analytics.db"
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the primary SQLite database file."""
        return self.workspace_dir / self.primary_db_name

    @property
    def analytics_db_path(self) -> Path:
        """Absolute path to the SQLite file holding the analytical copy."""
        return self.workspace_dir / self.analytics_db_name

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------
    sync_window_days: int = field(
        default_factory=lambda: int(os.environ.get("SYNC_WINDOW_DAYS", "7"))
    )
    sync_interval_seconds: float = field(
        default_factory=lambda: float(os.environ.get("SYNC_INTERVAL_SECONDS", "300"))
    )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    stats_recent_websites: int = field(
        default_factory=lambda: int(os.environ.get("STATS_RECENT_WEBSITES", "10"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "info")
    )
    log_format: str = field(
        default_factory=lambda: os.environ.get("LOG_FORMAT", "json")
    )


# Module-level singleton, import this everywhere:
#   from backend.config import settings
settings = Settings()
