"""Tests for the in-memory content store."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from travel_cms.adapters.memory_store import InMemoryContentStore
from travel_cms.domain.entities import ContentBlock, Page, Post
from travel_cms.domain.errors import ConflictError, NotFoundError, StaleWriteError

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def store() -> InMemoryContentStore:
    return InMemoryContentStore()


class TestInMemoryContentStore:
    def test_insert_and_get(self, store: InMemoryContentStore) -> None:
        page = Page(title="T", slug="t")
        store.insert("pages", page)
        assert store.get_by_id("pages", page.id) == page
        assert store.get_by_slug("pages", "t") == page

    def test_copies_on_read(self, store: InMemoryContentStore) -> None:
        page = Page(title="T", slug="t")
        store.insert("pages", page)
        fetched = store.get_by_id("pages", page.id)
        assert fetched is not None
        fetched.content["sections"].append({"type": "text"})
        assert store.get_by_id("pages", page.id).content == {"sections": []}  # type: ignore[union-attr]

    def test_slug_conflict(self, store: InMemoryContentStore) -> None:
        store.insert("pages", Page(title="A", slug="same"))
        with pytest.raises(ConflictError):
            store.insert("pages", Page(title="B", slug="same"))

    def test_id_conflict(self, store: InMemoryContentStore) -> None:
        page = Page(title="A", slug="a")
        store.insert("pages", page)
        with pytest.raises(ConflictError) as exc:
            store.insert("pages", page.model_copy(update={"slug": "b"}))
        assert exc.value.code == "id_taken"

    def test_list_newest_first(self, store: InMemoryContentStore) -> None:
        store.insert("posts", Post(title="Old", slug="old", updated_at=NOW))
        store.insert("posts", Post(title="New", slug="new", updated_at=NOW + timedelta(hours=1)))
        assert [p.slug for p in store.list("posts")] == ["new", "old"]  # type: ignore[union-attr]

    def test_list_blocks_by_type(self, store: InMemoryContentStore) -> None:
        store.insert("content_blocks", ContentBlock(name="A", type="cta", is_global=True))
        store.insert("content_blocks", ContentBlock(name="B", type="hero"))
        assert len(store.list("content_blocks", {"type": "cta", "is_global": True})) == 1

    def test_replace_conditional(self, store: InMemoryContentStore) -> None:
        page = Page(title="T", slug="t", status="scheduled", scheduled_at=NOW)
        store.insert("pages", page)
        published = page.model_copy(update={"status": "published"})

        store.replace("pages", published, expected_status="scheduled")
        with pytest.raises(StaleWriteError) as exc:
            store.replace("pages", published, expected_status="scheduled")
        assert exc.value.expected == "scheduled"
        assert exc.value.actual == "published"

    def test_replace_missing(self, store: InMemoryContentStore) -> None:
        with pytest.raises(NotFoundError):
            store.replace("pages", Page(title="T", slug="t"))

    def test_delete(self, store: InMemoryContentStore) -> None:
        page = Page(title="T", slug="t")
        store.insert("pages", page)
        assert store.delete("pages", page.id) is True
        assert store.delete("pages", page.id) is False
