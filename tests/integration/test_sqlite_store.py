"""
Integration tests for the SQLite content store.

Uses a real migrated database in a temporary directory.
"""

from __future__ import annotations

import sqlite3
import threading
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from travel_cms.adapters.sqlite.migrator import SQLiteMigrator
from travel_cms.adapters.sqlite.store import SQLiteContentStore
from travel_cms.domain.entities import ContentBlock, Page, Post
from travel_cms.domain.errors import (
    ConflictError,
    NotFoundError,
    StaleWriteError,
    StoreUnavailableError,
)

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    path = str(tmp_path / "travel_cms.db")
    SQLiteMigrator(path).run_migrations()
    return path


@pytest.fixture
def store(db_path: str) -> SQLiteContentStore:
    return SQLiteContentStore(db_path, timeout_seconds=1)


class TestMigrator:
    def test_creates_tables(self, db_path: str) -> None:
        conn = sqlite3.connect(db_path)
        try:
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        finally:
            conn.close()
        assert {"pages", "posts", "content_blocks", "_migrations"} <= tables

    def test_idempotent(self, db_path: str) -> None:
        assert SQLiteMigrator(db_path).run_migrations() == []


class TestSQLiteContentStore:
    def test_round_trip_keeps_unknown_content(self, store: SQLiteContentStore) -> None:
        content = {"sections": [{"type": "mystery", "nested": {"a": [1, 2]}}], "extra": True}
        page = Page(title="T", slug="t", content=content, page_type="esim")
        store.insert("pages", page)

        loaded = store.get_by_slug("pages", "t")
        assert loaded == page

    def test_post_round_trip(self, store: SQLiteContentStore) -> None:
        post = Post(title="P", slug="p", tags=["bali"], status="published", published_at=NOW)
        store.insert("posts", post)
        loaded = store.get_by_id("posts", post.id)
        assert isinstance(loaded, Post)
        assert loaded.published is True
        assert loaded.published_at == NOW

    def test_block_round_trip(self, store: SQLiteContentStore) -> None:
        block = ContentBlock(name="CTA", type="cta", content={"title": "Go"}, is_global=True)
        store.insert("content_blocks", block)
        assert store.get_by_id("content_blocks", block.id) == block

    def test_slug_unique(self, store: SQLiteContentStore) -> None:
        store.insert("pages", Page(title="A", slug="same"))
        with pytest.raises(ConflictError) as exc:
            store.insert("pages", Page(title="B", slug="same"))
        assert exc.value.code == "slug_taken"

    def test_slug_unique_on_replace(self, store: SQLiteContentStore) -> None:
        store.insert("pages", Page(title="A", slug="a"))
        b = Page(title="B", slug="b")
        store.insert("pages", b)
        with pytest.raises(ConflictError):
            store.replace("pages", b.model_copy(update={"slug": "a"}))
        assert store.get_by_id("pages", b.id).slug == "b"  # type: ignore[union-attr]

    def test_list_filters(self, store: SQLiteContentStore) -> None:
        store.insert("posts", Post(title="A", slug="a", status="scheduled", scheduled_at=NOW))
        store.insert("posts", Post(title="B", slug="b", category="news"))
        store.insert("posts", Post(title="C", slug="c", category="news", tags=["kl"]))

        scheduled = store.list("posts", {"status": "scheduled"})
        assert [p.slug for p in scheduled] == ["a"]  # type: ignore[union-attr]
        assert len(store.list("posts", {"category": "news"})) == 2
        tagged = store.list("posts", {"tag": "kl"})
        assert [p.slug for p in tagged] == ["c"]  # type: ignore[union-attr]

    def test_conditional_replace(self, store: SQLiteContentStore) -> None:
        page = Page(title="T", slug="t", status="scheduled", scheduled_at=NOW)
        store.insert("pages", page)
        published = page.model_copy(update={"status": "published", "scheduled_at": None})

        store.replace("pages", published, expected_status="scheduled")
        with pytest.raises(StaleWriteError) as exc:
            store.replace("pages", published, expected_status="scheduled")
        assert exc.value.actual == "published"

    def test_replace_missing(self, store: SQLiteContentStore) -> None:
        with pytest.raises(NotFoundError):
            store.replace("pages", Page(title="T", slug="t"), expected_status="draft")

    def test_delete(self, store: SQLiteContentStore) -> None:
        page = Page(title="T", slug="t")
        store.insert("pages", page)
        assert store.delete("pages", page.id)
        assert store.get_by_id("pages", page.id) is None

    def test_cas_across_connections(self, db_path: str) -> None:
        page = Page(
            title="T", slug="t", status="scheduled", scheduled_at=NOW - timedelta(minutes=1)
        )
        SQLiteContentStore(db_path).insert("pages", page)
        published = page.model_copy(update={"status": "published"})
        barrier = threading.Barrier(5)
        wins: list[bool] = []
        lock = threading.Lock()

        def attempt() -> None:
            store = SQLiteContentStore(db_path, timeout_seconds=5)
            barrier.wait()
            try:
                store.replace("pages", published, expected_status="scheduled")
                won = True
            except StaleWriteError:
                won = False
            with lock:
                wins.append(won)

        threads = [threading.Thread(target=attempt) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert wins.count(True) == 1

    def test_unavailable(self, tmp_path: Path) -> None:
        store = SQLiteContentStore(str(tmp_path / "missing-dir" / "x.db"))
        with pytest.raises(StoreUnavailableError):
            store.list("pages")

    def test_unmigrated_is_unavailable(self, tmp_path: Path) -> None:
        store = SQLiteContentStore(str(tmp_path / "empty.db"))
        with pytest.raises(StoreUnavailableError):
            store.get_by_slug("pages", "x")
