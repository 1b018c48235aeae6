"""Tracking façade: the single entry point used by the generation pipeline.

Usage::

    from backend.db import open_store
    from backend.tracker import Tracker

    tracker = Tracker(open_store())
    attempt_id = tracker.track_attempt(
        "https://stripe.com", "ollama/llama3.2:7b", code, duration_ms=3500
    )
    stats = tracker.model_stats("ollama/llama3.2:7b")

Store errors (``ValidationError``, ``ReferentialError``, ``IOFailure``)
propagate unchanged.
"""

from __future__ import annotations

from typing import Any, Optional

from backend.analytics import AnalyticsEngine
from backend.db.base import Store
from backend.db.models import (
    ModelStats,
    NewCloneAttempt,
    NewModelBenchmark,
    NewWebsite,
    check_attempt_fields,
)
from backend.log import get_logger
from backend.sample_data import SAMPLE_ATTEMPTS, SAMPLE_BENCHMARKS, SAMPLE_WEBSITES

logger = get_logger("tracker")

PLACEHOLDER_DESCRIPTION = "Scraped for cloning"


def placeholder_website(url: str) -> NewWebsite:
    """Website record used when an attempt references an unseen URL."""
    return NewWebsite(
        url=url,
        title=f"Website: {url}",
        description=PLACEHOLDER_DESCRIPTION,
        status="scraped",
    )


class Tracker:
    def __init__(self, store: Store) -> None:
        self.store = store
        self.analytics = AnalyticsEngine(store)

    def track_attempt(
        self,
        url: str,
        model_id: str,
        generated_output: str,
        duration_ms: int,
        status: str = "success",
        error_detail: Optional[str] = None,
        style: Optional[str] = None,
        instructions: Optional[str] = None,
        sandbox_url: Optional[str] = None,
    ) -> int:
        """Record one generation attempt against *url* and return its id.

        The website is found by URL or created with placeholder fields.
        Provider, size and component count are derived by the store.

        Raises:
            ValidationError: On an empty URL or model id, a bad status, a
                negative duration or text that is not valid UTF-8.  Nothing
                is written in that case.
            ReferentialError: Propagated from the store.
            IOFailure: Propagated from the store.
        """
        # Reject a bad attempt before the website write, not after it.
        check_attempt_fields(
            model_id,
            status,
            duration_ms,
            generated_code=generated_output,
            error_message=error_detail,
            style_selected=style,
            additional_instructions=instructions,
            sandbox_url=sandbox_url,
        )

        website, created = self.store.get_or_create_website(placeholder_website(url))
        if created:
            logger.info("website_registered", website_id=website.id, url=url)

        return self.store.create_clone_attempt(
            NewCloneAttempt(
                website_id=website.id,
                model_used=model_id,
                generated_code=generated_output,
                status=status,
                error_message=error_detail,
                generation_time_ms=duration_ms,
                style_selected=style,
                additional_instructions=instructions,
                sandbox_url=sandbox_url,
            )
        )

    def model_stats(self, model_id: str) -> Optional[ModelStats]:
        """Aggregate stats for *model_id*, or ``None`` if it has no attempts."""
        return self.analytics.model_stats(model_id)

    def export_data(self) -> dict[str, list[dict[str, Any]]]:
        return self.store.export_data()

    def seed_sample_data(self) -> int:
        """Insert the bundled sample dataset and return how many attempts were added.

        Idempotent: a sample website that already exists is left untouched and
        its sample attempt is not repeated.  Benchmarks are seeded only into an
        empty benchmark table.
        """
        added = 0
        for fields in SAMPLE_WEBSITES:
            website, created = self.store.get_or_create_website(NewWebsite(**fields))
            if not created:
                continue
            attempt = SAMPLE_ATTEMPTS[website.url]
            self.store.create_clone_attempt(
                NewCloneAttempt(website_id=website.id, status="success", **attempt)
            )
            added += 1

        if not self.store.list_model_benchmarks():
            for row in SAMPLE_BENCHMARKS:
                self.store.record_model_benchmark(NewModelBenchmark(**row))

        logger.info("sample_data_seeded", attempts_added=added)
        return added
