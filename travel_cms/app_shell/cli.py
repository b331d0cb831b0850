import argparse
import json
import logging
import sys
import threading
from typing import Any

from travel_cms.adapters.sqlite.migrator import SQLiteMigrator
from travel_cms.app_shell.config import Settings, configure_logging, validate_ops_rules
from travel_cms.app_shell.context import ServiceContext
from travel_cms.components.scheduler import ScheduledContent
from travel_cms.domain.errors import ContentError
from travel_cms.rules.loader import load_rules
from travel_cms.rules.models import Rules

logger = logging.getLogger("cli")


def load_config(settings: Settings) -> Rules:
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)
    rules = load_rules(settings.rules_path)
    configure_logging(rules)
    validate_ops_rules(rules, settings)
    return rules


def _print_scheduled(listing: ScheduledContent) -> None:
    for label, entities in (("pages", listing.pages), ("posts", listing.posts)):
        for entity in entities:
            when = entity.scheduled_at.isoformat() if entity.scheduled_at else "-"
            print(f"{when}  {label:<6} {entity.slug}  ({entity.title})")
    print(f"{listing.total} scheduled item(s).")


def handle_migrate(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    applied = SQLiteMigrator(settings.db_path(rules)).run_migrations()
    print(f"Applied {len(applied)} migration(s).")


def handle_publish_due(ctx: ServiceContext, args: argparse.Namespace) -> None:
    result = ctx.scheduler.run_once()
    print(
        f"Published {result.published} item(s); "
        f"{result.skipped} skipped, {result.failed} failed."
    )


def handle_scheduled(ctx: ServiceContext, args: argparse.Namespace) -> None:
    _print_scheduled(ctx.scheduler_service.scheduled_content())


def handle_upcoming(ctx: ServiceContext, args: argparse.Namespace) -> None:
    _print_scheduled(ctx.scheduler_service.upcoming_content())


def handle_stats(ctx: ServiceContext, args: argparse.Namespace) -> None:
    print(json.dumps(ctx.scheduler_service.stats().to_dict(), indent=2))


def handle_run_scheduler(ctx: ServiceContext, args: argparse.Namespace) -> None:
    ctx.scheduler.start(args.interval)
    try:
        # Sleep until interrupted; the scheduler thread does the work.
        threading.Event().wait()
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping scheduler")
    finally:
        ctx.scheduler.stop()


def handle_render(ctx: ServiceContext, args: argparse.Namespace) -> None:
    entity = ctx.content.get_by_slug(args.collection, args.slug)
    tree = ctx.renderer.render_entity(entity)
    output: dict[str, Any] = {"slug": args.slug, "status": getattr(entity, "status", None)}
    output.update(tree.to_dict())
    print(json.dumps(output, indent=2, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Travel CMS publication engine")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply pending database migrations")
    subparsers.add_parser("publish-due", help="Publish scheduled content that is due")
    subparsers.add_parser("scheduled", help="List scheduled content")
    subparsers.add_parser("upcoming", help="List content due in the next window")
    subparsers.add_parser("stats", help="Show content counts per status")

    run_parser = subparsers.add_parser("run-scheduler", help="Run the periodic scheduler")
    run_parser.add_argument(
        "--interval", type=float, default=None, help="Minutes between sweeps"
    )

    render_parser = subparsers.add_parser("render", help="Render a page or post as JSON")
    render_parser.add_argument("slug")
    render_parser.add_argument(
        "--collection", choices=["pages", "posts"], default="pages"
    )
    return parser


HANDLERS = {
    "publish-due": handle_publish_due,
    "scheduled": handle_scheduled,
    "upcoming": handle_upcoming,
    "stats": handle_stats,
    "run-scheduler": handle_run_scheduler,
    "render": handle_render,
}


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    rules = load_config(settings)

    if args.command == "migrate":
        handle_migrate(settings, rules, args)
        return

    ctx = ServiceContext.create(settings.db_path(rules), rules)
    try:
        HANDLERS[args.command](ctx, args)
    except ContentError as e:
        logger.error("%s: %s", e.code, e.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
