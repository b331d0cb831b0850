"""
Admin content API routes.

CRUD over pages, posts and content blocks plus lifecycle actions. Domain errors
propagate to the app-level handler, which maps them to 404/409/422/503.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Query, Response, status
from pydantic import BaseModel, Field

from travel_cms.api.deps import ContextDep, PrincipalDep
from travel_cms.domain.entities import Collection, ContentStatus, Entity

router = APIRouter()


# --- Request Models ---


class ScheduleRequest(BaseModel):
    """Request to schedule content."""

    scheduled_at: datetime = Field(..., description="Target publish time (UTC if naive)")


# --- Helpers ---


def entity_to_dict(entity: Entity) -> dict[str, Any]:
    return entity.model_dump(mode="json")


# --- CRUD ---


@router.get("/{collection}")
def list_content(
    collection: Collection,
    ctx: ContextDep,
    status_filter: ContentStatus | None = Query(default=None, alias="status"),
    page_type: str | None = None,
    category: str | None = None,
    tag: str | None = None,
    block_type: str | None = Query(default=None, alias="type"),
    is_global: bool | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> dict[str, Any]:
    filters: dict[str, Any] = {}
    if collection in ("pages", "posts"):
        filters["status"] = status_filter
    if collection == "pages":
        filters["page_type"] = page_type
    if collection == "posts":
        filters["category"] = category
        filters["tag"] = tag
    if collection == "content_blocks":
        filters["type"] = block_type
        filters["is_global"] = is_global

    items = ctx.content.list(collection, {k: v for k, v in filters.items() if v is not None})
    return {
        "items": [entity_to_dict(e) for e in items[offset : offset + limit]],
        "total": len(items),
    }


@router.post("/{collection}", status_code=status.HTTP_201_CREATED)
def create_content(
    collection: Collection,
    ctx: ContextDep,
    principal_id: PrincipalDep,
    data: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    return entity_to_dict(ctx.content.create(collection, data, author_id=principal_id))


@router.get("/{collection}/by-slug/{slug}")
def get_content_by_slug(collection: Collection, slug: str, ctx: ContextDep) -> dict[str, Any]:
    return entity_to_dict(ctx.content.get_by_slug(collection, slug))


@router.get("/{collection}/{entity_id}")
def get_content(collection: Collection, entity_id: UUID, ctx: ContextDep) -> dict[str, Any]:
    return entity_to_dict(ctx.content.get_by_id(collection, entity_id))


@router.patch("/{collection}/{entity_id}")
def update_content(
    collection: Collection,
    entity_id: UUID,
    ctx: ContextDep,
    changes: dict[str, Any] = Body(...),
    regenerate_slug: bool = False,
) -> dict[str, Any]:
    entity = ctx.content.update(collection, entity_id, changes, regenerate_slug=regenerate_slug)
    return entity_to_dict(entity)


@router.delete("/{collection}/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_content(collection: Collection, entity_id: UUID, ctx: ContextDep) -> Response:
    ctx.content.delete(collection, entity_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Lifecycle ---


@router.post("/{collection}/{entity_id}/publish")
def publish_content(collection: Collection, entity_id: UUID, ctx: ContextDep) -> dict[str, Any]:
    return entity_to_dict(ctx.publishing.publish(collection, entity_id))


@router.post("/{collection}/{entity_id}/schedule")
def schedule_content(
    collection: Collection,
    entity_id: UUID,
    request: ScheduleRequest,
    ctx: ContextDep,
) -> dict[str, Any]:
    entity = ctx.scheduler_service.schedule(collection, entity_id, request.scheduled_at)
    return entity_to_dict(entity)


@router.post("/{collection}/{entity_id}/cancel-schedule")
def cancel_schedule(collection: Collection, entity_id: UUID, ctx: ContextDep) -> dict[str, Any]:
    return entity_to_dict(ctx.scheduler_service.cancel(collection, entity_id))


@router.post("/{collection}/{entity_id}/archive")
def archive_content(collection: Collection, entity_id: UUID, ctx: ContextDep) -> dict[str, Any]:
    return entity_to_dict(ctx.publishing.archive(collection, entity_id))


@router.post("/{collection}/{entity_id}/restore")
def restore_content(collection: Collection, entity_id: UUID, ctx: ContextDep) -> dict[str, Any]:
    return entity_to_dict(ctx.publishing.restore(collection, entity_id))
