"""Tests for the JSON-file store: on-disk layout and failure handling."""

import json
from unittest.mock import patch

import pytest

from backend.db.file_store import FileStore
from backend.db.models import NewCloneAttempt, NewWebsite
from backend.errors import IOFailure


@pytest.fixture
def store(tmp_path):
    return FileStore(tmp_path)


def _seed(store):
    website_id = store.create_website(NewWebsite(url="https://example.com", title="Example"))
    store.create_clone_attempt(
        NewCloneAttempt(website_id=website_id, model_used="ollama/x", status="success")
    )
    return website_id


class TestLayout:
    def test_creates_empty_collections(self, tmp_path):
        FileStore(tmp_path / "fresh")
        for name in (
            "websites.json",
            "clone_attempts.json",
            "code_files.json",
            "model_benchmarks.json",
        ):
            assert json.loads((tmp_path / "fresh" / name).read_text()) == []

    def test_records_are_json_arrays_ordered_by_id(self, store, tmp_path):
        store.create_website(NewWebsite(url="https://b.com"))
        store.create_website(NewWebsite(url="https://a.com"))
        raw = json.loads((tmp_path / "websites.json").read_text())
        assert [r["id"] for r in raw] == [1, 2]
        assert raw[0]["url"] == "https://b.com"

    def test_attempt_file_holds_derived_fields(self, store, tmp_path):
        _seed(store)
        raw = json.loads((tmp_path / "clone_attempts.json").read_text())
        assert raw[0]["provider"] == "ollama"
        assert raw[0]["code_size_bytes"] == 0
        assert raw[0]["component_count"] == 0

    def test_reopen_sees_existing_data(self, store, tmp_path):
        _seed(store)
        reopened = FileStore(tmp_path)
        assert reopened.get_website_by_url("https://example.com").id == 1
        assert len(reopened.list_clone_attempts()) == 1

    def test_missing_file_is_io_failure(self, store, tmp_path):
        (tmp_path / "clone_attempts.json").unlink()
        with pytest.raises(IOFailure):
            store.list_clone_attempts()

    def test_missing_file_does_not_reuse_ids(self, store, tmp_path):
        website_id = _seed(store)
        (tmp_path / "clone_attempts.json").unlink()
        with pytest.raises(IOFailure):
            store.create_clone_attempt(
                NewCloneAttempt(website_id=website_id, model_used="ollama/x")
            )
        assert not (tmp_path / "clone_attempts.json").exists()


class TestCorruption:
    def test_invalid_json_is_io_failure(self, store, tmp_path):
        (tmp_path / "websites.json").write_text("{not json")
        with pytest.raises(IOFailure):
            store.list_websites()

    def test_non_array_is_io_failure(self, store, tmp_path):
        (tmp_path / "websites.json").write_text('{"id": 1}')
        with pytest.raises(IOFailure):
            store.list_websites()

    def test_record_missing_fields_is_io_failure(self, store, tmp_path):
        (tmp_path / "clone_attempts.json").write_text('[{"id": 1}]')
        with pytest.raises(IOFailure):
            store.list_clone_attempts()

    def test_undecodable_file_is_io_failure(self, store, tmp_path):
        (tmp_path / "websites.json").write_bytes(b"\xff\xfe[]")
        with pytest.raises(IOFailure):
            store.list_websites()


class TestAtomicWrites:
    def test_failed_sync_keeps_previous_file(self, store, tmp_path):
        _seed(store)
        before = (tmp_path / "clone_attempts.json").read_text()

        with patch("backend.db.atomic.os.fsync", side_effect=OSError("disk full")):
            with pytest.raises(IOFailure):
                store.create_clone_attempt(
                    NewCloneAttempt(website_id=1, model_used="ollama/x", status="error")
                )

        assert (tmp_path / "clone_attempts.json").read_text() == before
        assert not list(tmp_path.glob("*.tmp"))
        assert len(store.list_clone_attempts()) == 1

    def test_next_id_after_failure_is_not_skipped(self, store):
        _seed(store)
        with patch("backend.db.atomic.os.fsync", side_effect=OSError("boom")):
            with pytest.raises(IOFailure):
                store.create_website(NewWebsite(url="https://fails.com"))

        assert store.create_website(NewWebsite(url="https://works.com")) == 2
