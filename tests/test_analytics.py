"""Tests for the aggregate reports in backend.analytics."""

import pytest

from backend.analytics import (
    AnalyticsEngine,
    compute_model_stats,
    model_performance_summary,
    provider_comparison,
    website_complexity_analysis,
)
from backend.db import open_store
from backend.db.models import CloneAttempt, NewCloneAttempt, NewWebsite, Snapshot, Website


def _website(website_id, url, markdown=None):
    return Website.from_new(website_id, NewWebsite(url=url, title=url, markdown_content=markdown))


def _attempt(attempt_id, model, status="success", ms=1000, code="", website_id=1, at=None):
    return CloneAttempt.from_new(
        attempt_id,
        NewCloneAttempt(
            website_id=website_id,
            model_used=model,
            status=status,
            generation_time_ms=ms,
            generated_code=code,
            created_at=at,
        ),
    )


class TestModelStats:
    def test_worked_example(self):
        attempts = [
            _attempt(1, "ollama/llama3.2:7b", "success", 3000, "x" * 100),
            _attempt(2, "ollama/llama3.2:7b", "success", 4000, "x" * 300),
            _attempt(3, "ollama/llama3.2:7b", "error", 5000, "x" * 999),
        ]
        stats = compute_model_stats(attempts)
        assert stats.total_attempts == 3
        assert stats.success_rate == pytest.approx(66.67, abs=0.01)
        assert stats.avg_generation_time_ms == 4000
        assert stats.avg_code_size_bytes == 200

    def test_no_attempts_is_none(self):
        assert compute_model_stats([]) is None

    def test_no_successes_gives_zero_size(self):
        stats = compute_model_stats([_attempt(1, "a/b", "error", 10, "abc")])
        assert stats.success_rate == 0
        assert stats.avg_code_size_bytes == 0.0

    def test_missing_duration_counts_as_zero(self):
        stats = compute_model_stats([_attempt(1, "a/b", ms=None), _attempt(2, "a/b", ms=100)])
        assert stats.avg_generation_time_ms == 50

    def test_last_used_is_latest(self):
        stats = compute_model_stats(
            [
                _attempt(1, "a/b", at="2024-01-02T00:00:00Z"),
                _attempt(2, "a/b", at="2024-03-01T00:00:00Z"),
                _attempt(3, "a/b", at="2024-02-01T00:00:00Z"),
            ]
        )
        assert stats.last_used.startswith("2024-03-01")


class TestSummaries:
    @pytest.fixture
    def snapshot(self):
        return Snapshot(
            websites=(
                _website(1, "https://small.com", "one two"),
                _website(2, "https://big.com/page", "a b c d e f"),
                _website(3, "https://untouched.com"),
            ),
            attempts=(
                _attempt(1, "ollama/slow", "success", 6000, website_id=1),
                _attempt(2, "ollama/slow", "error", 8000, website_id=2),
                _attempt(3, "vllm/fast", "success", 1000, "abcd", website_id=2),
                _attempt(4, "customModel", "error", 3000, website_id=2),
            ),
        )

    def test_models_fastest_first(self, snapshot):
        rows = model_performance_summary(snapshot)
        assert [r.model_name for r in rows] == ["vllm/fast", "customModel", "ollama/slow"]
        slow = rows[2]
        assert slow.provider == "ollama"
        assert slow.total_attempts == 2
        assert slow.success_rate == 50
        assert slow.avg_generation_time == 7000

    def test_providers_most_successful_first(self, snapshot):
        rows = provider_comparison(snapshot)
        assert [r.provider for r in rows] == ["vllm", "ollama", "unknown"]
        assert rows[0].avg_code_size == 4

    def test_complexity_largest_first(self, snapshot):
        rows = website_complexity_analysis(snapshot)
        assert [r.domain for r in rows] == ["big.com", "small.com", "untouched.com"]
        big = rows[0]
        assert big.word_count == 6
        assert big.clone_attempts == 3
        assert big.avg_generation_time == 4000

    def test_website_without_attempts(self, snapshot):
        untouched = website_complexity_analysis(snapshot)[-1]
        assert untouched.clone_attempts == 0
        assert untouched.avg_generation_time is None
        assert untouched.avg_code_size is None

    def test_empty_snapshot(self):
        empty = Snapshot()
        assert model_performance_summary(empty) == []
        assert provider_comparison(empty) == []
        assert website_complexity_analysis(empty) == []


class TestEngine:
    def test_engine_reads_from_store(self, tmp_path):
        store = open_store("file", tmp_path)
        website_id = store.create_website(NewWebsite(url="https://a.com"))
        for ms in (100, 300):
            store.create_clone_attempt(
                NewCloneAttempt(
                    website_id=website_id,
                    model_used="ollama/x",
                    status="success",
                    generation_time_ms=ms,
                )
            )
        engine = AnalyticsEngine(store)
        assert engine.model_stats("ollama/x").avg_generation_time_ms == 200
        assert engine.model_stats("ollama/none") is None
        assert engine.model_performance_summary()[0].total_attempts == 2
        assert engine.provider_comparison()[0].provider == "ollama"
        assert engine.website_complexity_analysis()[0].clone_attempts == 2
