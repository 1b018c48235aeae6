"""Replication from the primary store into the analytical copy.

Only needed when the two are physically distinct stores.  The primary is
authoritative: each record created inside the trailing window is written to
the analytical copy with its own id, overwriting whatever was there.  Running
the same sync twice leaves the copy unchanged.

Usage::

    from backend.sync import sync_to_analytics

    result = sync_to_analytics(primary, analytics)
    print(result.websites, result.attempts)
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from backend.config import settings
from backend.db.base import Store
from backend.db.models import parse_timestamp
from backend.errors import TrackerError
from backend.log import get_logger

logger = get_logger("sync")


@dataclass
class SyncResult:
    websites: int = 0
    attempts: int = 0


def sync_to_analytics(
    primary: Store,
    analytics: Store,
    window: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> SyncResult:
    """Copy recently created records from *primary* into *analytics*.

    Args:
        primary: The authoritative store.
        analytics: The analytical copy.
        window: Trailing window; defaults to ``settings.sync_window_days``.
        now: End of the window (defaults to the current time).

    Returns:
        How many websites and attempts were written.

    Websites outside the window are still copied when a windowed attempt
    references them, so the copy never holds a dangling attempt.
    """
    window = window if window is not None else timedelta(days=settings.sync_window_days)
    end = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)
    cutoff = end - window

    # The primary lock is held only while the snapshot is copied.
    snap = primary.snapshot()

    attempts = [a for a in snap.attempts if parse_timestamp(a.created_at) > cutoff]
    needed = {a.website_id for a in attempts}
    websites = [
        w for w in snap.websites
        if parse_timestamp(w.scraped_at) > cutoff or w.id in needed
    ]

    for website in websites:
        analytics.upsert_website(website)
    for attempt in attempts:
        analytics.upsert_clone_attempt(attempt)

    result = SyncResult(websites=len(websites), attempts=len(attempts))
    logger.info(
        "analytics_sync_completed",
        websites=result.websites,
        attempts=result.attempts,
        cutoff=cutoff.isoformat(),
    )
    return result


class AnalyticsSync:
    """Runs :func:`sync_to_analytics` periodically on a daemon thread."""

    def __init__(
        self,
        primary: Store,
        analytics: Store,
        interval_seconds: Optional[float] = None,
        window: Optional[timedelta] = None,
    ) -> None:
        self.primary = primary
        self.analytics = analytics
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None else settings.sync_interval_seconds
        )
        self.window = window
        self.last_result: Optional[SyncResult] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def run_once(self) -> SyncResult:
        self.last_result = sync_to_analytics(self.primary, self.analytics, window=self.window)
        return self.last_result

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.run_once()
            except TrackerError as exc:
                # The next tick retries with fresh data.
                logger.error("analytics_sync_failed", error=str(exc))
            self._stop.wait(self.interval_seconds)

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="analytics-sync", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
