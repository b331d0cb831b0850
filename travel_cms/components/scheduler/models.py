"""
Scheduler component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from travel_cms.domain.entities import Collection, Page, Post


class PromotionOutcome(str, Enum):
    PUBLISHED = "published"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class PromotionResult:
    """Outcome of promoting one entity."""

    collection: Collection
    entity_id: UUID
    outcome: PromotionOutcome
    message: str = ""
    slug: str | None = None


@dataclass(frozen=True)
class SweepResult:
    """Outcome of one scheduler sweep."""

    started_at: datetime
    finished_at: datetime
    checked: int = 0
    results: list[PromotionResult] = field(default_factory=list)

    @property
    def published(self) -> int:
        return sum(1 for r in self.results if r.outcome == PromotionOutcome.PUBLISHED)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.outcome == PromotionOutcome.SKIPPED)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.outcome == PromotionOutcome.FAILED)

    @property
    def promoted_ids(self) -> list[UUID]:
        return [r.entity_id for r in self.results if r.outcome == PromotionOutcome.PUBLISHED]

    def to_dict(self) -> dict[str, object]:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "checked": self.checked,
            "published": self.published,
            "skipped": self.skipped,
            "failed": self.failed,
            "results": [
                {
                    "collection": r.collection,
                    "entity_id": str(r.entity_id),
                    "slug": r.slug,
                    "outcome": r.outcome.value,
                    "message": r.message,
                }
                for r in self.results
            ],
        }


@dataclass(frozen=True)
class SchedulerStatus:
    is_running: bool
    has_interval: bool
    interval_minutes: float | None = None
    sweeps_completed: int = 0
    last_run_at: datetime | None = None
    last_result: SweepResult | None = None
    last_error: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "is_running": self.is_running,
            "has_interval": self.has_interval,
            "interval_minutes": self.interval_minutes,
            "sweeps_completed": self.sweeps_completed,
            "last_run_at": self.last_run_at.isoformat() if self.last_run_at else None,
            "last_result": self.last_result.to_dict() if self.last_result else None,
            "last_error": self.last_error,
        }


@dataclass(frozen=True)
class ScheduledContent:
    """Scheduled pages and posts, soonest first."""

    pages: list[Page]
    posts: list[Post]

    @property
    def total(self) -> int:
        return len(self.pages) + len(self.posts)


@dataclass(frozen=True)
class StatusCounts:
    draft: int = 0
    scheduled: int = 0
    published: int = 0
    archived: int = 0

    @property
    def total(self) -> int:
        return self.draft + self.scheduled + self.published + self.archived

    def __add__(self, other: StatusCounts) -> StatusCounts:
        return StatusCounts(
            draft=self.draft + other.draft,
            scheduled=self.scheduled + other.scheduled,
            published=self.published + other.published,
            archived=self.archived + other.archived,
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "draft": self.draft,
            "scheduled": self.scheduled,
            "published": self.published,
            "archived": self.archived,
            "total": self.total,
        }


@dataclass(frozen=True)
class SchedulingStats:
    pages: StatusCounts
    posts: StatusCounts

    @property
    def total(self) -> StatusCounts:
        return self.pages + self.posts

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {
            "pages": self.pages.to_dict(),
            "posts": self.posts.to_dict(),
            "total": self.total.to_dict(),
        }


# --- Input ---


@dataclass(frozen=True)
class SweepInput:
    """Input for a single sweep; due-ness is judged by the service clock."""
