"""
End-to-end publication flow over SQLite.

Author -> schedule -> sweep -> public render, plus several scheduler
instances sharing one database.
"""

from __future__ import annotations

import threading
from datetime import timedelta
from pathlib import Path

from fastapi.testclient import TestClient

from travel_cms.adapters.clock import FrozenClock
from travel_cms.api.main import create_app
from travel_cms.app_shell.context import ServiceContext
from travel_cms.components.editor import ContentEditor
from travel_cms.rules.models import Rules


def test_author_schedule_publish_render(sqlite_ctx: ServiceContext, clock: FrozenClock) -> None:
    block = sqlite_ctx.content.create(
        "content_blocks",
        {"name": "Book now", "type": "cta", "content": {"title": "Book now"}, "is_global": True},
    )

    editor = ContentEditor()
    editor.add_section("hero", title="Study in Malaysia")
    editor.add_section("text", content="<p>Apply today</p><script>steal()</script>")
    editor.insert_block(block)  # type: ignore[arg-type]

    page = sqlite_ctx.content.create(
        "pages",
        {
            "title": "Study in Malaysia",
            "page_type": "study_malaysia",
            "content": editor.to_content(),
        },
    )
    sqlite_ctx.publishing.schedule("pages", page.id, clock.now_utc() + timedelta(hours=1))

    client = TestClient(create_app(sqlite_ctx))
    assert client.get("/api/public/pages/study-in-malaysia").status_code == 404

    clock.advance(hours=1, minutes=1)
    result = sqlite_ctx.scheduler.run_once()
    assert result.promoted_ids == [page.id]

    response = client.get("/api/public/pages/study-in-malaysia")
    assert response.status_code == 200
    sections = response.json()["sections"]
    assert [s["kind"] for s in sections] == ["hero", "text", "cta"]
    assert sections[1]["html"] == "<p>Apply today</p>"

    # Editing the global block later does not change the page.
    sqlite_ctx.content.update("content_blocks", block.id, {"content": {"title": "Changed"}})
    again = client.get("/api/public/pages/study-in-malaysia").json()
    assert again["sections"][2]["title"] == "Book now"


def test_multiple_scheduler_instances(tmp_path: Path, rules: Rules, clock: FrozenClock) -> None:
    db_path = str(tmp_path / "shared.db")
    contexts = [ServiceContext.create(db_path, rules, clock) for _ in range(3)]
    author = contexts[0]

    ids = []
    for n in range(6):
        page = author.content.create("pages", {"title": f"Package {n}"})
        author.publishing.schedule("pages", page.id, clock.now_utc() + timedelta(minutes=n + 1))
        ids.append(page.id)
    clock.advance(hours=1)

    promoted = []
    lock = threading.Lock()
    barrier = threading.Barrier(len(contexts))

    def sweep(ctx: ServiceContext) -> None:
        barrier.wait()
        result = ctx.scheduler.run_once()
        with lock:
            promoted.extend(result.promoted_ids)

    threads = [threading.Thread(target=sweep, args=(c,)) for c in contexts]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(promoted) == sorted(ids)
    stats = author.scheduler_service.stats()
    assert stats.pages.published == 6
    assert stats.pages.scheduled == 0
