"""
Scheduler - promotes scheduled pages and posts once their time arrives.

Key behaviors:
- A sweep lists scheduled content, keeps entries with scheduled_at <= now and
  promotes them oldest first
- Each promotion is a compare-and-swap on status, so overlapping sweeps (a
  periodic tick plus a manual run, or several processes) publish each entity
  exactly once; the losers record a skip
- One entity failing never stops the sweep; store unavailability aborts it
- A sweep that finds nothing due is silent apart from a debug log line

PublicationScheduler owns the background thread. It is an explicit object
created by the hosting process; nothing starts on import.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from travel_cms.components.publishing import PublishingService
from travel_cms.domain.entities import PUBLISHABLE_COLLECTIONS, Collection, PublishableContent
from travel_cms.domain.errors import (
    ContentError,
    NotFoundError,
    StaleWriteError,
    StoreUnavailableError,
)
from travel_cms.rules.models import SchedulingRules

from .models import (
    PromotionOutcome,
    PromotionResult,
    ScheduledContent,
    SchedulerStatus,
    SchedulingStats,
    StatusCounts,
    SweepResult,
)

logger = logging.getLogger(__name__)

# --- Configuration ---


@dataclass(frozen=True)
class SchedulerConfig:
    interval_minutes: float = 5.0
    upcoming_window: timedelta = timedelta(hours=24)

    @classmethod
    def from_rules(cls, rules: SchedulingRules) -> SchedulerConfig:
        return cls(
            interval_minutes=rules.interval_minutes,
            upcoming_window=rules.upcoming_window,
        )


DEFAULT_CONFIG = SchedulerConfig()


def _check_interval(interval_minutes: float) -> None:
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be positive")


def _scheduled_key(entity: PublishableContent) -> datetime:
    assert entity.scheduled_at is not None
    return entity.scheduled_at


class SchedulerService:
    """Sweep logic and operator queries over scheduled content."""

    def __init__(
        self,
        publishing: PublishingService,
        config: SchedulerConfig = DEFAULT_CONFIG,
    ) -> None:
        self.publishing = publishing
        self.content = publishing.content
        self.config = config

    def now(self) -> datetime:
        return self.content.clock.now_utc()

    # --- Queries ---

    def _scheduled(self, collection: Collection) -> list[PublishableContent]:
        entities = self.content.list(collection, {"status": "scheduled"})
        return [e for e in entities if isinstance(e, PublishableContent)]

    def due_content(
        self, now: datetime | None = None
    ) -> list[tuple[Collection, PublishableContent]]:
        """Scheduled entities whose time has come, oldest scheduled_at first."""
        now = now or self.now()
        due: list[tuple[Collection, PublishableContent]] = []
        for collection in PUBLISHABLE_COLLECTIONS:
            for entity in self._scheduled(collection):
                if entity.scheduled_at is None:
                    logger.warning(
                        "%s %s is scheduled without scheduled_at; skipping",
                        collection,
                        entity.id,
                    )
                    continue
                if entity.scheduled_at <= now:
                    due.append((collection, entity))
        due.sort(key=lambda pair: _scheduled_key(pair[1]))
        return due

    def scheduled_content(self) -> ScheduledContent:
        pages = sorted(
            (e for e in self._scheduled("pages") if e.scheduled_at is not None),
            key=_scheduled_key,
        )
        posts = sorted(
            (e for e in self._scheduled("posts") if e.scheduled_at is not None),
            key=_scheduled_key,
        )
        return ScheduledContent(pages=pages, posts=posts)  # type: ignore[arg-type]

    def upcoming_content(
        self,
        now: datetime | None = None,
        window: timedelta | None = None,
    ) -> ScheduledContent:
        """Scheduled content due between now and now + window (default 24 hours)."""
        now = now or self.now()
        end = now + (window or self.config.upcoming_window)
        scheduled = self.scheduled_content()

        def within(entity: PublishableContent) -> bool:
            return entity.scheduled_at is not None and now <= entity.scheduled_at <= end

        return ScheduledContent(
            pages=[p for p in scheduled.pages if within(p)],
            posts=[p for p in scheduled.posts if within(p)],
        )

    def stats(self) -> SchedulingStats:
        def count(collection: Collection) -> StatusCounts:
            totals = {"draft": 0, "scheduled": 0, "published": 0, "archived": 0}
            for entity in self.content.list(collection):
                status = getattr(entity, "status", None)
                if status in totals:
                    totals[status] += 1
            return StatusCounts(**totals)

        return SchedulingStats(pages=count("pages"), posts=count("posts"))

    # --- Operator actions ---

    def schedule(
        self, collection: Collection, entity_id: UUID, scheduled_at: datetime | str
    ) -> PublishableContent:
        return self.publishing.schedule(collection, entity_id, scheduled_at)

    def cancel(self, collection: Collection, entity_id: UUID) -> PublishableContent:
        return self.publishing.cancel_schedule(collection, entity_id)

    # --- Sweep ---

    def sweep(self) -> SweepResult:
        """
        Promote every scheduled entity that is due by the service clock.

        Raises:
            StoreUnavailableError: the store could not be read or written.
        """
        started_at = self.now()
        due = self.due_content(started_at)
        if not due:
            logger.debug("Scheduler sweep: nothing due")
            return SweepResult(started_at=started_at, finished_at=self.now())

        results = [self._promote(collection, entity) for collection, entity in due]
        result = SweepResult(
            started_at=started_at,
            finished_at=self.now(),
            checked=len(due),
            results=results,
        )
        logger.info(
            "Scheduler sweep: %d due, %d published, %d skipped, %d failed",
            result.checked,
            result.published,
            result.skipped,
            result.failed,
        )
        return result

    def _promote(self, collection: Collection, entity: PublishableContent) -> PromotionResult:
        try:
            published = self.publishing.promote(collection, entity.id)
        except StoreUnavailableError:
            raise
        except (StaleWriteError, NotFoundError) as e:
            logger.info("Skipped %s %s: %s", collection, entity.id, e.message)
            return PromotionResult(
                collection=collection,
                entity_id=entity.id,
                outcome=PromotionOutcome.SKIPPED,
                message=e.message,
                slug=entity.slug,
            )
        except ContentError as e:
            logger.warning("Failed to publish %s %s: %s", collection, entity.id, e.message)
            return PromotionResult(
                collection=collection,
                entity_id=entity.id,
                outcome=PromotionOutcome.FAILED,
                message=e.message,
                slug=entity.slug,
            )
        except Exception as e:
            logger.exception("Unexpected error publishing %s %s", collection, entity.id)
            return PromotionResult(
                collection=collection,
                entity_id=entity.id,
                outcome=PromotionOutcome.FAILED,
                message=str(e),
                slug=entity.slug,
            )

        logger.info("Published scheduled %s %s '%s'", collection, published.id, published.slug)
        return PromotionResult(
            collection=collection,
            entity_id=published.id,
            outcome=PromotionOutcome.PUBLISHED,
            slug=published.slug,
        )


class PublicationScheduler:
    """
    Periodic driver for SchedulerService.

    start() runs a sweep straight away and then every interval in a daemon
    thread. stop() stops further ticks and waits for a sweep in progress.
    run_once() sweeps synchronously in the caller's thread.

    Each loop gets its own stop event. At most one loop thread is alive per
    scheduler: a restart waits for the previous loop to exit first.
    """

    def __init__(
        self,
        service: SchedulerService,
        interval_minutes: float | None = None,
    ) -> None:
        if interval_minutes is None:
            interval_minutes = service.config.interval_minutes
        _check_interval(interval_minutes)
        self.service = service
        self._interval_minutes = interval_minutes
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lifecycle_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._sweeps_completed = 0
        self._last_run_at: datetime | None = None
        self._last_result: SweepResult | None = None
        self._last_error: str | None = None

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    @property
    def interval_minutes(self) -> float:
        return self._interval_minutes

    def start(self, interval_minutes: float | None = None) -> None:
        """
        Start periodic sweeps; restarts the loop if already running.

        A restart waits for the previous loop, including any sweep it is
        running, to exit before the new loop begins.
        """
        if interval_minutes is not None:
            _check_interval(interval_minutes)
        with self._lifecycle_lock:
            previous = self._thread
            if previous is not None:
                if previous is threading.current_thread():
                    raise RuntimeError("Cannot restart the scheduler from its own thread")
                self._stop_event.set()
                previous.join()
                self._thread = None
            if interval_minutes is not None:
                self._interval_minutes = interval_minutes

            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run_loop,
                args=(stop_event,),
                name="publication-scheduler",
                daemon=True,
            )
            self._stop_event = stop_event
            self._thread = thread
            thread.start()
        logger.info("Publication scheduler started (every %.1f min)", self._interval_minutes)

    def stop(self, timeout: float | None = None) -> None:
        """
        Stop periodic sweeps; a sweep already running is allowed to finish.

        If the sweep outlasts ``timeout`` the loop thread is still tracked, so
        a later start() waits for it instead of running beside it.
        """
        with self._lifecycle_lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()
            if thread is not threading.current_thread():
                thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("Publication scheduler stopping; sweep still in progress")
                return
            self._thread = None
        logger.info("Publication scheduler stopped")

    def run_once(self) -> SweepResult:
        """
        Sweep now, in the calling thread.

        Raises:
            StoreUnavailableError: the sweep was aborted.
        """
        try:
            result = self.service.sweep()
        except StoreUnavailableError as e:
            with self._state_lock:
                self._last_error = e.message
            raise
        with self._state_lock:
            self._sweeps_completed += 1
            self._last_run_at = result.started_at
            self._last_result = result
            self._last_error = None
        return result

    def get_status(self) -> SchedulerStatus:
        with self._state_lock:
            return SchedulerStatus(
                is_running=self.is_running,
                has_interval=self.is_running,
                interval_minutes=self._interval_minutes,
                sweeps_completed=self._sweeps_completed,
                last_run_at=self._last_run_at,
                last_result=self._last_result,
                last_error=self._last_error,
            )

    def _tick(self) -> None:
        try:
            self.run_once()
        except StoreUnavailableError as e:
            logger.error("Scheduler sweep aborted, store unavailable: %s", e.message)
        except Exception:
            logger.exception("Error in scheduler loop")

    def _run_loop(self, stop_event: threading.Event) -> None:
        self._tick()
        while not stop_event.wait(timeout=self._interval_minutes * 60):
            self._tick()


def create_scheduler_service(
    publishing: PublishingService,
    config: SchedulerConfig | None = None,
) -> SchedulerService:
    return SchedulerService(publishing, config or DEFAULT_CONFIG)


def create_publication_scheduler(
    service: SchedulerService,
    interval_minutes: float | None = None,
) -> PublicationScheduler:
    return PublicationScheduler(service, interval_minutes)
