"""
Admin scheduling API routes.

Operator view of the publication scheduler: manual sweeps, loop control,
scheduled and upcoming listings, and per-status counts for dashboards.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from travel_cms.api.deps import ContextDep
from travel_cms.components.scheduler import ScheduledContent

router = APIRouter()


class StartRequest(BaseModel):
    """Request to start the periodic scheduler."""

    interval_minutes: float | None = Field(default=None, gt=0)


def scheduled_to_dict(listing: ScheduledContent) -> dict[str, Any]:
    return {
        "pages": [p.model_dump(mode="json") for p in listing.pages],
        "posts": [p.model_dump(mode="json") for p in listing.posts],
        "total": listing.total,
    }


@router.post("/run")
def run_once(ctx: ContextDep) -> dict[str, Any]:
    return ctx.scheduler.run_once().to_dict()


@router.get("/status")
def scheduler_status(ctx: ContextDep) -> dict[str, Any]:
    return ctx.scheduler.get_status().to_dict()


@router.post("/start")
def start_scheduler(ctx: ContextDep, request: StartRequest | None = None) -> dict[str, Any]:
    ctx.scheduler.start(request.interval_minutes if request else None)
    return ctx.scheduler.get_status().to_dict()


@router.post("/stop")
def stop_scheduler(ctx: ContextDep) -> dict[str, Any]:
    ctx.scheduler.stop()
    return ctx.scheduler.get_status().to_dict()


@router.get("/scheduled")
def list_scheduled(ctx: ContextDep) -> dict[str, Any]:
    return scheduled_to_dict(ctx.scheduler_service.scheduled_content())


@router.get("/upcoming")
def list_upcoming(
    ctx: ContextDep,
    hours: int | None = Query(default=None, ge=1, le=24 * 31),
) -> dict[str, Any]:
    window = timedelta(hours=hours) if hours else None
    return scheduled_to_dict(ctx.scheduler_service.upcoming_content(window=window))


@router.get("/stats")
def scheduling_stats(ctx: ContextDep) -> dict[str, Any]:
    return ctx.scheduler_service.stats().to_dict()
