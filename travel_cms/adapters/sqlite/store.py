"""
SQLite content store.

Each collection is a table holding the indexed columns (slug, status,
scheduled_at, updated_at) next to the full entity serialized as JSON, so fields
the store does not know about survive untouched.

Key behaviors:
- Slug uniqueness enforced by a UNIQUE index, surfaced as ConflictError
- Conditional replace is a single ``UPDATE ... WHERE id = ? AND status = ?``
- Connection timeouts are bounded; lock/IO failures raise StoreUnavailableError
"""

from __future__ import annotations

import builtins
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from travel_cms.adapters.filters import check_filters, matches_filters
from travel_cms.domain.entities import Collection, ContentStatus, Entity, entity_type
from travel_cms.domain.errors import (
    ConflictError,
    NotFoundError,
    StaleWriteError,
    StoreUnavailableError,
)

# Table names are fixed; never interpolate caller input into SQL.
_TABLES: dict[str, str] = {
    "pages": "pages",
    "posts": "posts",
    "content_blocks": "content_blocks",
}


def _table(collection: Collection) -> str:
    entity_type(collection)
    return _TABLES[collection]


def _row_values(entity: Entity) -> tuple[str | None, str | None, str | None, str, str]:
    scheduled_at = getattr(entity, "scheduled_at", None)
    return (
        getattr(entity, "slug", None),
        getattr(entity, "status", None),
        scheduled_at.isoformat() if scheduled_at else None,
        entity.updated_at.isoformat(),
        entity.model_dump_json(),
    )


def _slug_conflict(collection: Collection, entity: Entity) -> ConflictError:
    slug = getattr(entity, "slug", None)
    return ConflictError(
        code="slug_taken",
        message=f"Slug '{slug}' is already used in {collection}",
        field="slug",
    )


class SQLiteContentStore:
    def __init__(self, db_path: str, timeout_seconds: float = 10.0):
        self.db_path = db_path
        self.timeout_seconds = timeout_seconds

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout_seconds)
        except sqlite3.OperationalError as e:
            raise StoreUnavailableError(f"Cannot open content store: {e}") from e
        try:
            yield conn
            conn.commit()
        except sqlite3.OperationalError as e:
            conn.rollback()
            raise StoreUnavailableError(f"Content store operation failed: {e}") from e
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _load(self, collection: Collection, data_json: str) -> Entity:
        return entity_type(collection).model_validate_json(data_json)

    def insert(self, collection: Collection, entity: Entity) -> Entity:
        table = _table(collection)
        slug, status, scheduled_at, updated_at, data_json = _row_values(entity)
        with self._connect() as conn:
            try:
                conn.execute(
                    f"INSERT INTO {table} "
                    "(id, slug, status, scheduled_at, updated_at, data_json) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (str(entity.id), slug, status, scheduled_at, updated_at, data_json),
                )
            except sqlite3.IntegrityError as e:
                if "slug" in str(e):
                    raise _slug_conflict(collection, entity) from e
                raise ConflictError(
                    code="id_taken",
                    message=f"{collection} entry {entity.id} already exists",
                    field="id",
                ) from e
        return entity.model_copy(deep=True)

    def get_by_id(self, collection: Collection, entity_id: UUID) -> Entity | None:
        table = _table(collection)
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT data_json FROM {table} WHERE id = ?", (str(entity_id),)
            ).fetchone()
        return self._load(collection, row[0]) if row else None

    def get_by_slug(self, collection: Collection, slug: str) -> Entity | None:
        table = _table(collection)
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT data_json FROM {table} WHERE slug = ?", (slug,)
            ).fetchone()
        return self._load(collection, row[0]) if row else None

    def list(
        self, collection: Collection, filters: dict[str, Any] | None = None
    ) -> builtins.list[Entity]:
        table = _table(collection)
        check_filters(collection, filters)
        status = (filters or {}).get("status")
        with self._connect() as conn:
            if status is not None:
                rows = conn.execute(
                    f"SELECT data_json FROM {table} WHERE status = ?", (status,)
                ).fetchall()
            else:
                rows = conn.execute(f"SELECT data_json FROM {table}").fetchall()
        found = [self._load(collection, row[0]) for row in rows]
        found = [entity for entity in found if matches_filters(entity, filters)]
        found.sort(key=lambda e: e.updated_at, reverse=True)
        return found

    def replace(
        self,
        collection: Collection,
        entity: Entity,
        expected_status: ContentStatus | None = None,
    ) -> Entity:
        table = _table(collection)
        slug, status, scheduled_at, updated_at, data_json = _row_values(entity)
        sql = (
            f"UPDATE {table} SET slug = ?, status = ?, scheduled_at = ?, "
            "updated_at = ?, data_json = ? WHERE id = ?"
        )
        params: list[Any] = [slug, status, scheduled_at, updated_at, data_json, str(entity.id)]
        if expected_status is not None:
            sql += " AND status = ?"
            params.append(expected_status)

        with self._connect() as conn:
            try:
                cursor = conn.execute(sql, params)
            except sqlite3.IntegrityError as e:
                raise _slug_conflict(collection, entity) from e

            if cursor.rowcount == 0:
                row = conn.execute(
                    f"SELECT status FROM {table} WHERE id = ?", (str(entity.id),)
                ).fetchone()
                if row is None:
                    raise NotFoundError(collection, entity.id)
                raise StaleWriteError(collection, entity.id, str(expected_status), row[0])

        return entity.model_copy(deep=True)

    def delete(self, collection: Collection, entity_id: UUID) -> bool:
        table = _table(collection)
        with self._connect() as conn:
            cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (str(entity_id),))
            return cursor.rowcount > 0
