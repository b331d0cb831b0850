"""
Content component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from travel_cms.domain.entities import Collection, Entity
from travel_cms.domain.errors import ContentError

# --- Error Detail ---


@dataclass(frozen=True)
class ErrorDetail:
    """Structured error for presentation layers."""

    kind: str
    code: str
    message: str
    field: str | None = None

    @classmethod
    def from_error(cls, error: ContentError) -> ErrorDetail:
        return cls(kind=error.kind, code=error.code, message=error.message, field=error.field)


# --- Input Models ---


@dataclass(frozen=True)
class CreateContentInput:
    """Input for creating a page, post or content block."""

    collection: Collection
    data: dict[str, Any]
    author_id: UUID | None = None


@dataclass(frozen=True)
class UpdateContentInput:
    """Partial update; only keys present in changes are written."""

    collection: Collection
    entity_id: UUID
    changes: dict[str, Any]
    regenerate_slug: bool = False


@dataclass(frozen=True)
class GetContentInput:
    """Lookup by id or slug (id wins when both are given)."""

    collection: Collection
    entity_id: UUID | None = None
    slug: str | None = None


@dataclass(frozen=True)
class ListContentInput:
    collection: Collection
    filters: dict[str, Any] = field(default_factory=dict)
    limit: int | None = None
    offset: int = 0


@dataclass(frozen=True)
class DeleteContentInput:
    collection: Collection
    entity_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class ContentOutput:
    """Output for single-entity operations."""

    entity: Entity | None
    errors: list[ErrorDetail] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ContentListOutput:
    items: list[Entity]
    total: int
    errors: list[ErrorDetail] = field(default_factory=list)
    success: bool = True
