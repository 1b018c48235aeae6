"""Aggregate statistics over clone attempts.

The functions here are pure: they take a :class:`~backend.db.models.Snapshot`
(or a list of attempts) and return aggregate rows.  :class:`AnalyticsEngine`
binds them to a store (either the primary store or the analytical copy
maintained by :mod:`backend.sync`) and takes one snapshot per report.

Conventions shared by every aggregate:

* success rate is ``successes / total * 100``;
* mean generation time is taken over all attempts (a missing time counts 0);
* mean code size is taken over successful attempts only (0.0 when none);
* a group with no attempts produces no row.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Iterable, Optional, Sequence

from backend.db.base import Store
from backend.db.models import (
    CloneAttempt,
    ModelStats,
    ModelSummary,
    ProviderComparison,
    Snapshot,
    WebsiteComplexity,
    content_metrics,
    domain_of,
)

SUCCESS = "success"


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def _group(
    attempts: Iterable[CloneAttempt],
    key: Callable[[CloneAttempt], str],
) -> dict[str, list[CloneAttempt]]:
    groups: dict[str, list[CloneAttempt]] = defaultdict(list)
    for attempt in attempts:
        groups[key(attempt)].append(attempt)
    return groups


def success_rate(attempts: Sequence[CloneAttempt]) -> float:
    successes = sum(1 for a in attempts if a.status == SUCCESS)
    return successes / len(attempts) * 100


def mean_generation_time(attempts: Sequence[CloneAttempt]) -> float:
    return sum(a.generation_time_ms or 0 for a in attempts) / len(attempts)


def mean_code_size(attempts: Sequence[CloneAttempt]) -> float:
    sizes = [a.code_size_bytes for a in attempts if a.status == SUCCESS]
    return sum(sizes) / len(sizes) if sizes else 0.0


def last_used(attempts: Sequence[CloneAttempt]) -> Optional[str]:
    return max((a.created_at for a in attempts), default=None)


def compute_model_stats(attempts: Sequence[CloneAttempt]) -> Optional[ModelStats]:
    """Aggregate one model's attempts.  ``None`` when there are none."""
    if not attempts:
        return None
    return ModelStats(
        total_attempts=len(attempts),
        success_rate=success_rate(attempts),
        avg_generation_time_ms=mean_generation_time(attempts),
        avg_code_size_bytes=mean_code_size(attempts),
        last_used=last_used(attempts),
    )


def model_performance_summary(snapshot: Snapshot) -> list[ModelSummary]:
    """One row per model, fastest mean generation time first."""
    rows = []
    for model, attempts in _group(snapshot.attempts, lambda a: a.model_used).items():
        rows.append(
            ModelSummary(
                model_name=model,
                provider=attempts[0].provider,
                total_attempts=len(attempts),
                success_rate=success_rate(attempts),
                avg_generation_time=mean_generation_time(attempts),
                avg_code_size=mean_code_size(attempts),
                last_used=last_used(attempts),
            )
        )
    return sorted(rows, key=lambda r: (r.avg_generation_time, r.model_name))


def provider_comparison(snapshot: Snapshot) -> list[ProviderComparison]:
    """One row per provider, highest success rate first."""
    rows = []
    for provider, attempts in _group(snapshot.attempts, lambda a: a.provider).items():
        rows.append(
            ProviderComparison(
                provider=provider,
                total_attempts=len(attempts),
                success_rate=success_rate(attempts),
                avg_generation_time=mean_generation_time(attempts),
                avg_code_size=mean_code_size(attempts),
            )
        )
    return sorted(rows, key=lambda r: (-r.success_rate, r.provider))


def website_complexity_analysis(snapshot: Snapshot) -> list[WebsiteComplexity]:
    """One row per website, largest scraped content (word count) first.

    Websites without attempts are included with ``clone_attempts == 0`` and
    ``None`` means.
    """
    by_website: dict[int, list[CloneAttempt]] = defaultdict(list)
    for attempt in snapshot.attempts:
        by_website[attempt.website_id].append(attempt)

    rows = []
    for website in snapshot.websites:
        attempts = by_website.get(website.id, [])
        content_length, word_count = content_metrics(website.markdown_content)
        rows.append(
            WebsiteComplexity(
                website_id=website.id,
                domain=domain_of(website.url),
                title=website.title,
                word_count=word_count,
                content_length=content_length,
                clone_attempts=len(attempts),
                avg_generation_time=mean_generation_time(attempts) if attempts else None,
                avg_code_size=mean_code_size(attempts) if attempts else None,
            )
        )
    return sorted(rows, key=lambda r: (-r.word_count, r.website_id))


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class AnalyticsEngine:
    """Read-side reports over whatever :class:`Store` it is given."""

    def __init__(self, store: Store) -> None:
        self.store = store

    def model_stats(self, model_used: str) -> Optional[ModelStats]:
        return compute_model_stats(self.store.list_clone_attempts_by_model(model_used))

    def model_performance_summary(self) -> list[ModelSummary]:
        return model_performance_summary(self.store.snapshot())

    def provider_comparison(self) -> list[ProviderComparison]:
        return provider_comparison(self.store.snapshot())

    def website_complexity_analysis(self) -> list[WebsiteComplexity]:
        return website_complexity_analysis(self.store.snapshot())
