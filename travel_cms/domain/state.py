"""
Publication lifecycle shared by pages and posts.

Transitions:
- draft -> scheduled (scheduled_at strictly in the future)
- draft -> published
- scheduled -> published (scheduler promotion or manual publish)
- scheduled -> draft (cancellation, clears scheduled_at)
- published -> archived
- archived -> draft (restore)
- any -> same status (no lifecycle effect)

Invariants:
- published_at is set the first time an entity is published and never moves
- published_at is never later than the clock used to set it
- scheduled_at is present and in the future whenever an entity enters scheduled

All functions are pure: they return a new entity and never write anywhere.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, TypeVar

from travel_cms.domain.entities import ContentStatus, PublishableContent, ensure_utc
from travel_cms.domain.errors import InvalidTransitionError, ValidationError

T = TypeVar("T", bound=PublishableContent)

TRANSITIONS: dict[ContentStatus, frozenset[ContentStatus]] = {
    "draft": frozenset({"scheduled", "published"}),
    "scheduled": frozenset({"published", "draft"}),
    "published": frozenset({"archived"}),
    "archived": frozenset({"draft"}),
}


def can_transition(current: ContentStatus, new: ContentStatus) -> bool:
    if current == new:
        return True
    return new in TRANSITIONS.get(current, frozenset())


def check_scheduled_at(
    scheduled_at: datetime | None,
    now: datetime,
    max_ahead: timedelta | None = None,
) -> datetime:
    """
    Validate a target publish time and return it normalised to UTC.

    Raises:
        ValidationError: if missing, not strictly in the future, or beyond max_ahead.
    """
    if scheduled_at is None:
        raise ValidationError(
            code="scheduled_at_required",
            message="A scheduled time is required to schedule content",
            field="scheduled_at",
        )
    target = ensure_utc(scheduled_at)
    assert target is not None
    if target <= now:
        raise ValidationError(
            code="scheduled_at_not_future",
            message="Scheduled time must be in the future",
            field="scheduled_at",
        )
    if max_ahead is not None and target > now + max_ahead:
        raise ValidationError(
            code="scheduled_at_too_far",
            message=f"Cannot schedule more than {max_ahead.days} days in advance",
            field="scheduled_at",
        )
    return target


class PublicationStateMachine:
    """
    Applies lifecycle transitions to pages and posts.

    max_schedule_ahead bounds how far in the future content may be scheduled;
    None disables the bound.
    """

    def __init__(
        self,
        transitions: dict[ContentStatus, frozenset[ContentStatus]] | None = None,
        max_schedule_ahead: timedelta | None = None,
    ) -> None:
        self.transitions = transitions or TRANSITIONS
        self.max_schedule_ahead = max_schedule_ahead

    def allowed_from(self, status: ContentStatus) -> frozenset[ContentStatus]:
        return self.transitions.get(status, frozenset())

    def transition(
        self,
        entity: T,
        new_status: ContentStatus,
        now: datetime,
        scheduled_at: datetime | None = None,
    ) -> T:
        """
        Return a copy of entity moved to new_status with lifecycle side effects.

        scheduled_at overrides the entity's own value when moving to scheduled.
        updated_at is bumped on every call, including same-status calls.

        Raises:
            InvalidTransitionError: pair not allowed, or guard failed.
        """
        current = entity.status
        updates: dict[str, Any] = {"updated_at": now}

        if current == new_status:
            if new_status == "scheduled" and scheduled_at is not None:
                # Rescheduling keeps the status but must still target the future.
                updates["scheduled_at"] = self._guard_schedule(current, scheduled_at, now)
            return entity.model_copy(update=updates)

        if new_status not in self.allowed_from(current):
            raise InvalidTransitionError(current, new_status)

        updates["status"] = new_status

        if new_status == "scheduled":
            target = scheduled_at if scheduled_at is not None else entity.scheduled_at
            updates["scheduled_at"] = self._guard_schedule(current, target, now)

        elif new_status == "published":
            if entity.published_at is None:
                updates["published_at"] = now
            updates["scheduled_at"] = None

        elif new_status == "draft" and current == "scheduled":
            updates["scheduled_at"] = None

        return entity.model_copy(update=updates)

    def _guard_schedule(
        self, current: ContentStatus, scheduled_at: datetime | None, now: datetime
    ) -> datetime:
        try:
            return check_scheduled_at(scheduled_at, now, self.max_schedule_ahead)
        except ValidationError as e:
            error = InvalidTransitionError(current, "scheduled", e.message)
            error.field = e.field
            raise error from e
