"""
In-memory content store.

Thread-safe: every operation holds one re-entrant lock, so a conditional
replace is a true compare-and-swap even with several scheduler threads.
Entities are copied on the way in and out; callers never share state with the
store.
"""

from __future__ import annotations

import threading
from typing import Any
from uuid import UUID

from travel_cms.adapters.filters import check_filters, matches_filters
from travel_cms.domain.entities import Collection, ContentStatus, Entity, entity_type
from travel_cms.domain.errors import ConflictError, NotFoundError, StaleWriteError


class InMemoryContentStore:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._data: dict[Collection, dict[UUID, Entity]] = {
            "pages": {},
            "posts": {},
            "content_blocks": {},
        }

    def _collection(self, collection: Collection) -> dict[UUID, Entity]:
        entity_type(collection)
        return self._data[collection]

    def _check_slug(self, collection: Collection, entity: Entity) -> None:
        slug = getattr(entity, "slug", None)
        if slug is None:
            return
        for other in self._data[collection].values():
            if other.id != entity.id and getattr(other, "slug", None) == slug:
                raise ConflictError(
                    code="slug_taken",
                    message=f"Slug '{slug}' is already used in {collection}",
                    field="slug",
                )

    def insert(self, collection: Collection, entity: Entity) -> Entity:
        with self._lock:
            items = self._collection(collection)
            if entity.id in items:
                raise ConflictError(
                    code="id_taken",
                    message=f"{collection} entry {entity.id} already exists",
                    field="id",
                )
            self._check_slug(collection, entity)
            items[entity.id] = entity.model_copy(deep=True)
            return entity.model_copy(deep=True)

    def get_by_id(self, collection: Collection, entity_id: UUID) -> Entity | None:
        with self._lock:
            entity = self._collection(collection).get(entity_id)
            return entity.model_copy(deep=True) if entity else None

    def get_by_slug(self, collection: Collection, slug: str) -> Entity | None:
        with self._lock:
            for entity in self._collection(collection).values():
                if getattr(entity, "slug", None) == slug:
                    return entity.model_copy(deep=True)
            return None

    def list(self, collection: Collection, filters: dict[str, Any] | None = None) -> list[Entity]:
        check_filters(collection, filters)
        with self._lock:
            found = [
                entity.model_copy(deep=True)
                for entity in self._collection(collection).values()
                if matches_filters(entity, filters)
            ]
        found.sort(key=lambda e: e.updated_at, reverse=True)
        return found

    def replace(
        self,
        collection: Collection,
        entity: Entity,
        expected_status: ContentStatus | None = None,
    ) -> Entity:
        with self._lock:
            items = self._collection(collection)
            current = items.get(entity.id)
            if current is None:
                raise NotFoundError(collection, entity.id)
            if expected_status is not None:
                actual = getattr(current, "status", None)
                if actual != expected_status:
                    raise StaleWriteError(collection, entity.id, expected_status, str(actual))
            self._check_slug(collection, entity)
            items[entity.id] = entity.model_copy(deep=True)
            return entity.model_copy(deep=True)

    def delete(self, collection: Collection, entity_id: UUID) -> bool:
        with self._lock:
            return self._collection(collection).pop(entity_id, None) is not None
