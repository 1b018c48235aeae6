"""Tests for the SQLite store: schema, pragmas and generated columns."""

import pytest

from backend.db.connection import get_connection
from backend.db.models import NewCloneAttempt, NewWebsite, content_metrics
from backend.db.schema import init_db, table_names
from backend.db.sqlite_store import SQLiteStore
from backend.errors import ReferentialError


@pytest.fixture
def store(tmp_path):
    s = SQLiteStore(tmp_path / "tracker.db")
    yield s
    s.close()


class TestSchema:
    def test_tables_exist(self, store):
        assert {"websites", "clone_attempts", "code_files", "model_benchmarks"} <= table_names(
            store._conn
        )

    def test_init_is_idempotent(self, store):
        init_db(store._conn)
        init_db(store._conn)
        assert "websites" in table_names(store._conn)

    def test_foreign_keys_enabled(self, store):
        assert store._conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    def test_in_memory_connection(self):
        conn = get_connection(":memory:")
        init_db(conn)
        assert "clone_attempts" in table_names(conn)
        conn.close()

    def test_creates_parent_directory(self, tmp_path):
        s = SQLiteStore(tmp_path / "nested" / "dir" / "t.db")
        assert (tmp_path / "nested" / "dir" / "t.db").exists()
        s.close()


class TestGeneratedColumns:
    def test_website_metrics_match_python(self, store):
        markdown = "# Title\n\nsome words here and there"
        website_id = store.create_website(
            NewWebsite(url="https://a.com", markdown_content=markdown)
        )
        row = store._conn.execute(
            "SELECT content_length, word_count FROM websites WHERE id = ?", (website_id,)
        ).fetchone()
        assert (row["content_length"], row["word_count"]) == content_metrics(markdown)

    def test_website_without_content(self, store):
        website_id = store.create_website(NewWebsite(url="https://b.com"))
        row = store._conn.execute(
            "SELECT content_length, word_count FROM websites WHERE id = ?", (website_id,)
        ).fetchone()
        assert (row["content_length"], row["word_count"]) == (0, 0)

    def test_code_size_is_utf8_bytes(self, store):
        website_id = store.create_website(NewWebsite(url="https://c.com"))
        code = "const s = 'héllo ✓';"
        attempt_id = store.create_clone_attempt(
            NewCloneAttempt(website_id=website_id, model_used="ollama/x", generated_code=code)
        )
        assert store.get_clone_attempt(attempt_id).code_size_bytes == len(code.encode("utf-8"))


class TestIntegrity:
    def test_foreign_key_violation_is_referential_error(self, store):
        with pytest.raises(ReferentialError):
            store.create_clone_attempt(NewCloneAttempt(website_id=9, model_used="ollama/x"))

    def test_failed_insert_does_not_consume_rows(self, store):
        website_id = store.create_website(NewWebsite(url="https://d.com"))
        with pytest.raises(ReferentialError):
            store.create_clone_attempt(NewCloneAttempt(website_id=99, model_used="ollama/x"))
        attempt_id = store.create_clone_attempt(
            NewCloneAttempt(website_id=website_id, model_used="ollama/x")
        )
        assert store.list_clone_attempts()[0].id == attempt_id
        assert len(store.list_clone_attempts()) == 1

    def test_data_survives_reopen(self, tmp_path):
        path = tmp_path / "persist.db"
        with SQLiteStore(path) as s:
            s.create_website(NewWebsite(url="https://e.com", metadata={"k": "v"}))
        with SQLiteStore(path) as s:
            assert s.get_website_by_url("https://e.com").metadata == {"k": "v"}
