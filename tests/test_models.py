"""Record model tests: validation and derived fields.

No store is involved; these exercise ``backend.db.models`` directly.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from backend.db.models import (
    CloneAttempt,
    CodeFile,
    NewCloneAttempt,
    NewCodeFile,
    NewModelBenchmark,
    NewWebsite,
    Website,
    byte_size,
    content_metrics,
    count_components,
    derive_provider,
    domain_of,
    normalise_timestamp,
)
from backend.errors import ValidationError


class TestDeriveProvider:
    def test_namespaced_model(self) -> None:
        assert derive_provider("ollama/llama3.2:7b") == "ollama"

    def test_no_separator_is_unknown(self) -> None:
        assert derive_provider("customModel") == "unknown"

    def test_only_first_separator_counts(self) -> None:
        assert derive_provider("vllm/meta-llama/CodeLlama-7b-Instruct-hf") == "vllm"


class TestHeuristics:
    def test_component_count_non_overlapping(self) -> None:
        code = (
            "export default function App() {}\n"
            "export default function Other() {}\n"
            "function helper() {}"
        )
        assert count_components(code) == 2

    def test_component_count_empty(self) -> None:
        assert count_components("") == 0
        assert count_components(None) == 0

    def test_component_count_custom_marker(self) -> None:
        assert count_components("<Card/><Card/>", marker="<Card/>") == 2

    def test_byte_size_is_utf8_length(self) -> None:
        assert byte_size("abc") == 3
        assert byte_size("héllo") == 6
        assert byte_size(None) == 0

    def test_content_metrics(self) -> None:
        assert content_metrics("one two three") == (13, 3)
        assert content_metrics("") == (0, 1)
        assert content_metrics(None) == (0, 0)

    def test_domain_of(self) -> None:
        assert domain_of("https://stripe.com/pricing") == "stripe.com"

    def test_domain_of_drops_port_and_credentials(self) -> None:
        assert domain_of("https://user:pw@Stripe.com:8443/x") == "stripe.com"
        assert domain_of("stripe.com") == ""


class TestTimestamps:
    def test_z_suffix_is_normalised(self) -> None:
        assert normalise_timestamp("2024-05-01T12:00:00Z") == "2024-05-01T12:00:00.000000+00:00"

    def test_offset_converted_to_utc(self) -> None:
        assert normalise_timestamp("2024-05-01T14:00:00+02:00") == "2024-05-01T12:00:00.000000+00:00"

    def test_datetime_accepted(self) -> None:
        dt = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        assert normalise_timestamp(dt) == "2024-05-01T12:00:00.000000+00:00"

    def test_string_order_matches_time_order(self) -> None:
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        stamps = [normalise_timestamp(base + timedelta(microseconds=n * 999_999)) for n in range(5)]
        assert stamps == sorted(stamps)

    def test_garbage_rejected(self) -> None:
        with pytest.raises(ValidationError):
            normalise_timestamp("yesterday")


class TestNewWebsite:
    def test_empty_url_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NewWebsite(url="")

    def test_blank_url_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NewWebsite(url="   ")

    def test_unencodable_title_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NewWebsite(url="https://a.io", title="\udc80")

    def test_defaults(self) -> None:
        new = NewWebsite(url="https://example.com")
        assert new.status == "scraped"
        assert new.metadata == {}
        assert new.scraped_at is not None

    def test_from_new_copies_metadata(self) -> None:
        meta = {"industry": "fintech"}
        website = Website.from_new(4, NewWebsite(url="https://a.io", metadata=meta))
        meta["industry"] = "changed"
        assert website.id == 4
        assert website.metadata == {"industry": "fintech"}

    def test_dict_roundtrip(self) -> None:
        website = Website.from_new(1, NewWebsite(url="https://a.io", title="A", metadata={"k": [1]}))
        assert Website.from_dict(website.to_dict()) == website


class TestNewCloneAttempt:
    def test_unencodable_code_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NewCloneAttempt(website_id=1, model_used="ollama/x", generated_code="\ud800")

    @pytest.mark.parametrize("website_id", [None, 0, -3])
    def test_bad_website_id_rejected(self, website_id) -> None:
        with pytest.raises(ValidationError):
            NewCloneAttempt(website_id=website_id, model_used="ollama/x")

    def test_empty_model_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NewCloneAttempt(website_id=1, model_used="")

    def test_unknown_status_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NewCloneAttempt(website_id=1, model_used="ollama/x", status="failed")

    def test_negative_duration_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NewCloneAttempt(website_id=1, model_used="ollama/x", generation_time_ms=-1)

    def test_none_code_becomes_empty(self) -> None:
        new = NewCloneAttempt(website_id=1, model_used="ollama/x", generated_code=None)  # type: ignore[arg-type]
        assert new.generated_code == ""


class TestCloneAttemptFromNew:
    def test_derived_fields(self) -> None:
        code = "export default function App() { return <p>é</p> }"
        attempt = CloneAttempt.from_new(
            7,
            NewCloneAttempt(
                website_id=2,
                model_used="lmstudio/gpt-oss-20b",
                generated_code=code,
                status="success",
                generation_time_ms=1200,
            ),
        )
        assert attempt.id == 7
        assert attempt.provider == "lmstudio"
        assert attempt.code_size_bytes == len(code.encode("utf-8"))
        assert attempt.component_count == 1

    def test_dict_roundtrip(self) -> None:
        attempt = CloneAttempt.from_new(
            1, NewCloneAttempt(website_id=1, model_used="customModel", generated_code="x")
        )
        assert CloneAttempt.from_dict(attempt.to_dict()) == attempt


class TestSatellites:
    def test_code_file_metrics(self) -> None:
        code_file = CodeFile.from_new(
            1, NewCodeFile(clone_attempt_id=1, file_path="src/App.jsx", file_content="a\nb\nc")
        )
        assert code_file.lines_of_code == 3
        assert code_file.file_size_bytes == 5

    def test_code_file_requires_path(self) -> None:
        with pytest.raises(ValidationError):
            NewCodeFile(clone_attempt_id=1, file_path="", file_content="")

    def test_benchmark_rejects_unknown_complexity(self) -> None:
        with pytest.raises(ValidationError):
            NewModelBenchmark(
                model_name="m",
                provider="p",
                website_complexity="huge",
                avg_generation_time_ms=1.0,
                avg_code_quality_score=1.0,
                success_rate=1.0,
                avg_user_satisfaction=1.0,
                total_attempts=1,
            )
