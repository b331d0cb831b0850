"""
Regression tests for the publication engine's core guarantees.

Each scenario walks one page through the lifecycle using a frozen clock.
"""

from __future__ import annotations

import random
from datetime import timedelta

import pytest

from travel_cms.adapters.clock import FrozenClock
from travel_cms.app_shell.context import ServiceContext
from travel_cms.components.render import DiagnosticView, HeroView, render_content
from travel_cms.domain.entities import ContentStatus, Page
from travel_cms.domain.errors import ConflictError, ValidationError
from travel_cms.domain.state import TRANSITIONS, PublicationStateMachine


class TestScenarios:
    def test_schedule_then_publish_once(self, ctx: ServiceContext, clock: FrozenClock) -> None:
        page = ctx.content.create("pages", {"title": "Visa Services", "status": "draft"})
        assert page.scheduled_at is None  # type: ignore[union-attr]
        start = clock.now_utc()

        # 1. Schedule an hour ahead.
        scheduled = ctx.content.update(
            "pages", page.id, {"status": "scheduled", "scheduled_at": start + timedelta(hours=1)}
        )
        assert scheduled.status == "scheduled"  # type: ignore[union-attr]
        assert scheduled.published_at is None  # type: ignore[union-attr]

        # 2. Rescheduling into the past is rejected.
        with pytest.raises(ValidationError):
            ctx.content.update(
                "pages",
                page.id,
                {"status": "scheduled", "scheduled_at": start - timedelta(hours=1)},
            )

        # 3. Once due, a sweep publishes it.
        clock.advance(hours=1, minutes=1)
        first = ctx.scheduler.run_once()
        published = ctx.content.get_by_id("pages", page.id)
        assert first.promoted_ids == [page.id]
        assert published.status == "published"  # type: ignore[union-attr]
        assert published.published_at == clock.now_utc()  # type: ignore[union-attr]

        # 4. Running again changes nothing.
        second = ctx.scheduler.run_once()
        assert second.checked == 0
        assert ctx.content.get_by_id("pages", page.id) == published

    def test_unknown_section_is_placeholder(self) -> None:
        tree = render_content(
            [{"type": "hero", "title": "T"}, {"type": "mystery", "payload": {"x": 1}}]
        )

        assert len(tree) == 2
        hero, placeholder = tree.sections
        assert isinstance(hero, HeroView)
        assert hero.title == "T"
        assert isinstance(placeholder, DiagnosticView)
        assert '"x": 1' in placeholder.raw

    def test_slug_uniqueness_includes_derived_slugs(self, ctx: ServiceContext) -> None:
        first = ctx.content.create("pages", {"title": "My Guide"})
        assert first.slug == "my-guide"  # type: ignore[union-attr]

        with pytest.raises(ConflictError):
            ctx.content.create("pages", {"title": "My Guide", "slug": "my-guide"})
        with pytest.raises(ConflictError):
            ctx.content.create("pages", {"title": "My Guide"})


class TestProperties:
    @pytest.mark.parametrize("hours", [-48, -1, 0])
    def test_scheduling_requires_future(
        self, ctx: ServiceContext, clock: FrozenClock, hours: int
    ) -> None:
        page = ctx.content.create("pages", {"title": f"Page {hours}"})
        with pytest.raises(ValidationError):
            ctx.publishing.schedule("pages", page.id, clock.now_utc() + timedelta(hours=hours))
        assert ctx.content.get_by_id("pages", page.id).status == "draft"  # type: ignore[union-attr]

    @pytest.mark.parametrize("seed", range(20))
    def test_published_at_set_once(self, seed: int) -> None:
        rng = random.Random(seed)
        clock = FrozenClock(Page(title="x", slug="x").created_at)
        machine = PublicationStateMachine()
        page = Page(title="Random walk", slug="random-walk")
        first_published = None

        for _ in range(30):
            clock.advance(minutes=rng.randint(1, 120))
            targets: list[ContentStatus] = sorted(TRANSITIONS[page.status])
            target = rng.choice(targets)
            page = machine.transition(
                page, target, clock.now_utc(), scheduled_at=clock.now_utc() + timedelta(hours=1)
            )
            if page.published_at is not None:
                if first_published is None:
                    first_published = page.published_at
                assert page.published_at == first_published
                assert page.published_at <= clock.now_utc()
            if page.status == "scheduled":
                assert page.scheduled_at is not None
                assert page.scheduled_at > clock.now_utc()

    def test_render_is_pure_and_ordered(self) -> None:
        sections = [
            {"type": "cta", "title": "Book"},
            {"no": "type"},
            {"type": "gallery", "images": []},
            {"type": "faq", "items": ["Q"]},
            "garbage",
            {"type": "text", "content": "<p>x</p>"},
        ]
        first = render_content(sections)
        second = render_content(sections)

        assert first == second
        assert [s.kind for s in first.sections] == [
            "cta",
            "diagnostic",
            "gallery",
            "faq",
            "diagnostic",
            "text",
        ]

    def test_status_is_single_source_of_truth(self, ctx: ServiceContext) -> None:
        post = ctx.content.create("posts", {"title": "News", "published": True})
        ctx.publishing.archive("posts", post.id)
        stored = ctx.content.get_by_id("posts", post.id)
        assert stored.status == "archived"  # type: ignore[union-attr]
        assert stored.model_dump()["published"] is False
