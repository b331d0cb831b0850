from __future__ import annotations

from dataclasses import dataclass

from travel_cms.adapters.clock import SystemClock
from travel_cms.adapters.memory_store import InMemoryContentStore
from travel_cms.adapters.sqlite.migrator import SQLiteMigrator
from travel_cms.adapters.sqlite.store import SQLiteContentStore
from travel_cms.components.content import (
    ContentConfig,
    ContentService,
    create_content_service,
)
from travel_cms.components.publishing import PublishingService, create_publishing_service
from travel_cms.components.render import RenderConfig, RenderService, create_render_service
from travel_cms.components.scheduler import (
    PublicationScheduler,
    SchedulerConfig,
    SchedulerService,
    create_publication_scheduler,
    create_scheduler_service,
)
from travel_cms.domain.state import PublicationStateMachine
from travel_cms.ports.clock import ClockPort
from travel_cms.ports.store import ContentStorePort
from travel_cms.rules.models import Rules

@dataclass
class ServiceContext:
    rules: Rules
    clock: ClockPort
    store: ContentStorePort
    content: ContentService
    publishing: PublishingService
    scheduler_service: SchedulerService
    scheduler: PublicationScheduler
    renderer: RenderService

    @classmethod
    def build(
        cls,
        store: ContentStorePort,
        rules: Rules,
        clock: ClockPort | None = None,
    ) -> ServiceContext:
        clock = clock or SystemClock()
        machine = PublicationStateMachine(
            max_schedule_ahead=rules.scheduling.max_schedule_ahead
        )
        content = create_content_service(
            store, clock, machine, ContentConfig.from_rules(rules.content)
        )
        publishing = create_publishing_service(content)
        scheduler_service = create_scheduler_service(
            publishing, SchedulerConfig.from_rules(rules.scheduling)
        )
        return cls(
            rules=rules,
            clock=clock,
            store=store,
            content=content,
            publishing=publishing,
            scheduler_service=scheduler_service,
            scheduler=create_publication_scheduler(scheduler_service),
            renderer=create_render_service(RenderConfig.from_rules(rules.render)),
        )

    @classmethod
    def create(
        cls,
        db_path: str,
        rules: Rules,
        clock: ClockPort | None = None,
        migrate: bool = True,
    ) -> ServiceContext:
        """SQLite-backed context; applies pending migrations first."""
        if migrate:
            SQLiteMigrator(db_path).run_migrations()
        store = SQLiteContentStore(db_path, timeout_seconds=rules.scheduling.store_timeout_seconds)
        return cls.build(store, rules, clock)

    @classmethod
    def in_memory(cls, rules: Rules | None = None, clock: ClockPort | None = None) -> ServiceContext:
        return cls.build(InMemoryContentStore(), rules or Rules(), clock)
