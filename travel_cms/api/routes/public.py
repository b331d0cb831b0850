"""
Public content API routes.

Serves rendered pages and posts. Only published content is visible; anything
else answers 404 exactly like a missing slug.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, status

from travel_cms.api.deps import ContextDep
from travel_cms.app_shell.context import ServiceContext
from travel_cms.components.render import build_metadata
from travel_cms.domain.entities import Collection, Page, Post
from travel_cms.domain.errors import NotFoundError

router = APIRouter()


def _published(ctx: ServiceContext, collection: Collection, slug: str) -> Page | Post:
    try:
        entity = ctx.content.get_by_slug(collection, slug)
    except NotFoundError:
        entity = None
    if not isinstance(entity, (Page, Post)) or entity.status != "published":
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return entity


def _rendered(ctx: ServiceContext, entity: Page | Post) -> dict[str, Any]:
    metadata = build_metadata(entity)
    return {
        "id": str(entity.id),
        "slug": entity.slug,
        "title": entity.title,
        "metadata": {
            "title": metadata.title,
            "description": metadata.description,
            "image": metadata.image,
            "published_at": metadata.published_at,
        },
        **ctx.renderer.render_entity(entity).to_dict(),
    }


@router.get("/pages/{slug}")
def get_page(slug: str, ctx: ContextDep) -> dict[str, Any]:
    page = _published(ctx, "pages", slug)
    assert isinstance(page, Page)
    data = _rendered(ctx, page)
    data["page_type"] = page.page_type
    return data


@router.get("/posts")
def list_posts(
    ctx: ContextDep,
    category: str | None = None,
    tag: str | None = None,
) -> dict[str, Any]:
    filters = {"status": "published", "category": category, "tag": tag}
    posts = ctx.content.list("posts", {k: v for k, v in filters.items() if v is not None})
    items = sorted(
        (p for p in posts if isinstance(p, Post)),
        key=lambda p: p.published_at or p.updated_at,
        reverse=True,
    )
    return {
        "items": [
            {
                "slug": p.slug,
                "title": p.title,
                "excerpt": p.excerpt,
                "category": p.category,
                "tags": p.tags,
                "featured": p.featured,
                "featured_image": p.featured_image,
                "published_at": p.published_at.isoformat() if p.published_at else None,
            }
            for p in items
        ],
        "total": len(items),
    }


@router.get("/posts/{slug}")
def get_post(slug: str, ctx: ContextDep) -> dict[str, Any]:
    post = _published(ctx, "posts", slug)
    assert isinstance(post, Post)
    data = _rendered(ctx, post)
    data.update(
        excerpt=post.excerpt,
        category=post.category,
        tags=post.tags,
        featured=post.featured,
    )
    return data
