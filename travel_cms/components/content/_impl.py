"""
Content store service: typed CRUD over pages, posts and content blocks.

Key behaviors:
- Slugs are derived from the title when none is supplied
- A title change keeps the existing slug unless regeneration is requested
- Any status change is applied through the publication state machine
- Writes to pages and posts are conditional on the status read at the start of
  the operation, so an edit never silently undoes a concurrent promotion
- Section content is stored verbatim; the store never interprets it

Invariants:
- slug unique per collection (enforced by the store at write time)
- id, created_at, updated_at and published_at cannot be written by callers
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from travel_cms.domain.entities import (
    CONTENT_STATUSES,
    Collection,
    ContentBlock,
    ContentStatus,
    Entity,
    PublishableContent,
    entity_type,
)
from travel_cms.domain.errors import NotFoundError, ValidationError, from_pydantic
from travel_cms.domain.slugs import SLUG_PATTERN, is_valid_slug, slugify
from travel_cms.domain.state import PublicationStateMachine
from travel_cms.ports.clock import ClockPort
from travel_cms.ports.store import ContentStorePort
from travel_cms.rules.models import ContentRules

logger = logging.getLogger(__name__)

READ_ONLY_FIELDS = frozenset({"id", "created_at", "updated_at", "published_at"})

_DATETIME = TypeAdapter(datetime)


# --- Configuration ---


@dataclass(frozen=True)
class ContentConfig:
    slug_pattern: str = SLUG_PATTERN
    slug_max_length: int = 200
    title_max_length: int = 200
    block_name_max_length: int = 120

    @classmethod
    def from_rules(cls, rules: ContentRules) -> ContentConfig:
        return cls(
            slug_pattern=rules.slug.pattern,
            slug_max_length=rules.slug.max,
            title_max_length=rules.title.max,
            block_name_max_length=rules.block_name.max,
        )


DEFAULT_CONFIG = ContentConfig()


def parse_datetime(value: Any, field: str) -> datetime | None:
    """Accept datetimes or ISO-8601 strings; None passes through."""
    if value is None:
        return None
    try:
        return _DATETIME.validate_python(value)
    except PydanticValidationError as e:
        raise ValidationError(
            code=f"{field}_invalid",
            message=f"{field} must be an ISO-8601 datetime",
            field=field,
        ) from e


def _check_status(value: Any) -> ContentStatus:
    if value not in CONTENT_STATUSES:
        raise ValidationError(
            code="status_invalid",
            message=f"Unknown status '{value}'",
            field="status",
        )
    return value  # type: ignore[no-any-return]


class ContentService:
    """CRUD over the three content collections."""

    def __init__(
        self,
        store: ContentStorePort,
        clock: ClockPort,
        state_machine: PublicationStateMachine | None = None,
        config: ContentConfig = DEFAULT_CONFIG,
    ) -> None:
        self.store = store
        self.clock = clock
        self.state_machine = state_machine or PublicationStateMachine()
        self.config = config

    # --- Reads ---

    def get_by_id(self, collection: Collection, entity_id: UUID) -> Entity:
        entity = self.store.get_by_id(collection, entity_id)
        if entity is None:
            raise NotFoundError(collection, entity_id)
        return entity

    def get_by_slug(self, collection: Collection, slug: str) -> Entity:
        if collection == "content_blocks":
            raise ValidationError(
                code="slug_unsupported",
                message="Content blocks are looked up by id",
                field="slug",
            )
        entity = self.store.get_by_slug(collection, slug)
        if entity is None:
            raise NotFoundError(collection, slug, field="slug")
        return entity

    def list(self, collection: Collection, filters: dict[str, Any] | None = None) -> list[Entity]:
        entity_type(collection)
        return self.store.list(collection, filters or {})

    # --- Writes ---

    def create(
        self,
        collection: Collection,
        data: dict[str, Any],
        author_id: UUID | None = None,
    ) -> Entity:
        model = entity_type(collection)
        now = self.clock.now_utc()
        payload = {k: v for k, v in data.items() if k not in READ_ONLY_FIELDS}
        payload["created_at"] = now
        payload["updated_at"] = now

        if model is ContentBlock:
            if author_id is not None and not payload.get("created_by"):
                payload["created_by"] = author_id
            block = self._build(model, payload)
            self._validate_block(block)  # type: ignore[arg-type]
            created = self.store.insert(collection, block)
            logger.info("Created %s %s", collection, created.id)
            return created

        requested = payload.pop("status", None)
        legacy_published = payload.pop("published", None)
        if requested is None and legacy_published and collection == "posts":
            requested = "published"
        target = _check_status(requested or "draft")
        scheduled_at = parse_datetime(payload.pop("scheduled_at", None), "scheduled_at")

        if author_id is not None and not payload.get("author_id"):
            payload["author_id"] = author_id
        payload["slug"] = self._resolve_slug(payload.get("slug"), payload.get("title"))
        payload["status"] = "draft"

        entity = self._build(model, payload)
        self._validate_fields(entity)  # type: ignore[arg-type]

        if target != "draft":
            entity = self.state_machine.transition(
                entity, target, now, scheduled_at=scheduled_at  # type: ignore[type-var]
            )
        elif scheduled_at is not None:
            entity = entity.model_copy(update={"scheduled_at": scheduled_at})

        created = self.store.insert(collection, entity)
        logger.info("Created %s %s '%s' (%s)", collection, created.id, created.slug, target)
        return created

    def update(
        self,
        collection: Collection,
        entity_id: UUID,
        changes: dict[str, Any],
        regenerate_slug: bool = False,
    ) -> Entity:
        """
        Merge changes into the stored entity.

        A ``status`` key routes through the state machine. For posts, the legacy
        ``published`` flag is accepted as a shorthand for status changes.

        Raises:
            NotFoundError, ConflictError, ValidationError
        """
        current = self.get_by_id(collection, entity_id)
        model = type(current)
        now = self.clock.now_utc()
        payload = {k: v for k, v in changes.items() if k not in READ_ONLY_FIELDS}

        if isinstance(current, ContentBlock):
            payload["updated_at"] = now
            block = self._build(model, {**current.model_dump(), **payload})
            self._validate_block(block)  # type: ignore[arg-type]
            return self.store.replace(collection, block)

        assert isinstance(current, PublishableContent)

        new_status = payload.pop("status", None)
        legacy_published = payload.pop("published", None)
        if (
            new_status is None
            and legacy_published is not None
            and bool(legacy_published) != (current.status == "published")
        ):
            new_status = "published" if legacy_published else "draft"
        target = _check_status(new_status or current.status)

        has_schedule = "scheduled_at" in payload
        scheduled_at = parse_datetime(payload.pop("scheduled_at", None), "scheduled_at")

        # A null or empty slug means "unchanged", never "derive a new one".
        if not payload.get("slug"):
            payload.pop("slug", None)
        if "slug" in payload or regenerate_slug:
            payload["slug"] = self._resolve_slug(
                payload.get("slug"), payload.get("title", current.title)
            )

        merged = self._build(model, {**current.model_dump(), **payload})
        self._validate_fields(merged)  # type: ignore[arg-type]

        if target == "scheduled":
            updated = self.state_machine.transition(
                merged, target, now, scheduled_at=scheduled_at  # type: ignore[type-var]
            )
        else:
            updated = self.state_machine.transition(merged, target, now)  # type: ignore[type-var]
            if has_schedule:
                if target != "draft":
                    raise ValidationError(
                        code="scheduled_at_not_allowed",
                        message=f"scheduled_at cannot be set on {target} content",
                        field="scheduled_at",
                    )
                updated = updated.model_copy(update={"scheduled_at": scheduled_at})

        saved = self.store.replace(collection, updated, expected_status=current.status)
        if saved.status != current.status:
            logger.info(
                "%s %s: %s -> %s", collection, saved.id, current.status, saved.status
            )
        return saved

    def delete(self, collection: Collection, entity_id: UUID) -> None:
        entity_type(collection)
        if not self.store.delete(collection, entity_id):
            raise NotFoundError(collection, entity_id)
        logger.info("Deleted %s %s", collection, entity_id)

    # --- Helpers ---

    def _build(self, model: type[Entity], payload: dict[str, Any]) -> Entity:  # type: ignore[valid-type]
        try:
            return model.model_validate(payload)  # type: ignore[no-any-return,attr-defined]
        except PydanticValidationError as e:
            raise from_pydantic(e) from e

    def _resolve_slug(self, slug: Any, title: Any) -> str:
        if slug:
            if not isinstance(slug, str) or not is_valid_slug(
                slug.strip(), self.config.slug_pattern, self.config.slug_max_length
            ):
                raise ValidationError(
                    code="slug_invalid",
                    message="Slug must contain only lowercase letters, numbers, and hyphens",
                    field="slug",
                )
            return slug.strip()

        if not isinstance(title, str) or not title.strip():
            # Title validation reports the real problem.
            return "untitled"
        derived = slugify(title)[: self.config.slug_max_length].rstrip("-")
        if not derived:
            raise ValidationError(
                code="slug_underivable",
                message="Cannot derive a slug from this title; supply one explicitly",
                field="slug",
            )
        return derived

    def _validate_fields(self, entity: PublishableContent) -> None:
        if not entity.title.strip():
            raise ValidationError(code="title_required", message="Title is required", field="title")
        if len(entity.title) > self.config.title_max_length:
            raise ValidationError(
                code="title_too_long",
                message=f"Title exceeds {self.config.title_max_length} characters",
                field="title",
            )

    def _validate_block(self, block: ContentBlock) -> None:
        if not block.name.strip():
            raise ValidationError(code="name_required", message="Name is required", field="name")
        if len(block.name) > self.config.block_name_max_length:
            raise ValidationError(
                code="name_too_long",
                message=f"Name exceeds {self.config.block_name_max_length} characters",
                field="name",
            )


def create_content_service(
    store: ContentStorePort,
    clock: ClockPort,
    state_machine: PublicationStateMachine | None = None,
    config: ContentConfig | None = None,
) -> ContentService:
    return ContentService(store, clock, state_machine, config or DEFAULT_CONFIG)
