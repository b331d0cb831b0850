"""
Publishing service - lifecycle operations on pages and posts.

Every operation goes through ContentService.update, so the state machine,
slug rules and conditional writes apply uniformly. Promotion of due content is
the one exception: it writes straight to the store with a compare-and-swap on
``status == scheduled`` so concurrent sweeps promote each entity exactly once.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from travel_cms.components.content import ContentService, parse_datetime
from travel_cms.domain.entities import (
    PUBLISHABLE_COLLECTIONS,
    Collection,
    ContentStatus,
    PublishableContent,
)
from travel_cms.domain.errors import StaleWriteError, ValidationError

logger = logging.getLogger(__name__)


def require_publishable(collection: Collection) -> None:
    if collection not in PUBLISHABLE_COLLECTIONS:
        raise ValidationError(
            code="not_publishable",
            message=f"{collection} have no publication lifecycle",
            field="collection",
        )


class PublishingService:
    def __init__(self, content: ContentService) -> None:
        self.content = content

    def _move(
        self,
        collection: Collection,
        entity_id: UUID,
        status: ContentStatus,
        **extra: Any,
    ) -> PublishableContent:
        require_publishable(collection)
        entity = self.content.update(collection, entity_id, {"status": status, **extra})
        return entity  # type: ignore[return-value]

    def publish(self, collection: Collection, entity_id: UUID) -> PublishableContent:
        return self._move(collection, entity_id, "published")

    def schedule(
        self, collection: Collection, entity_id: UUID, scheduled_at: datetime | str
    ) -> PublishableContent:
        """Schedule (or reschedule) content; the time must be in the future."""
        when = parse_datetime(scheduled_at, "scheduled_at")
        if when is None:
            raise ValidationError(
                code="scheduled_at_required",
                message="A scheduled time is required to schedule content",
                field="scheduled_at",
            )
        return self._move(collection, entity_id, "scheduled", scheduled_at=when)

    def cancel_schedule(self, collection: Collection, entity_id: UUID) -> PublishableContent:
        require_publishable(collection)
        current = self.content.get_by_id(collection, entity_id)
        if getattr(current, "status", None) != "scheduled":
            raise ValidationError(
                code="not_scheduled",
                message=f"{collection} entry {entity_id} is not scheduled",
                field="status",
            )
        return self._move(collection, entity_id, "draft")

    def archive(self, collection: Collection, entity_id: UUID) -> PublishableContent:
        return self._move(collection, entity_id, "archived")

    def restore(self, collection: Collection, entity_id: UUID) -> PublishableContent:
        return self._move(collection, entity_id, "draft")

    def promote(self, collection: Collection, entity_id: UUID) -> PublishableContent:
        """
        Promote one due scheduled entity to published.

        Due-ness and published_at both come from the service clock.

        Raises:
            StaleWriteError: entity no longer scheduled (promoted or cancelled elsewhere)
            ValidationError: scheduled time not reached yet
            NotFoundError: entity deleted
        """
        require_publishable(collection)
        now = self.content.clock.now_utc()
        fresh = self.content.get_by_id(collection, entity_id)
        assert isinstance(fresh, PublishableContent)

        if fresh.status != "scheduled":
            raise StaleWriteError(collection, entity_id, "scheduled", fresh.status)
        if fresh.scheduled_at is None or fresh.scheduled_at > now:
            raise ValidationError(
                code="not_due",
                message=f"{collection} entry {entity_id} is not due yet",
                field="scheduled_at",
            )

        published = self.content.state_machine.transition(fresh, "published", now)
        saved = self.content.store.replace(collection, published, expected_status="scheduled")
        return saved  # type: ignore[return-value]


def create_publishing_service(content: ContentService) -> PublishingService:
    return PublishingService(content)
