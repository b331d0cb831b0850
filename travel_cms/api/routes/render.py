from typing import Any

from fastapi import APIRouter, Body

from travel_cms.api.deps import ContextDep

router = APIRouter()


@router.post("/preview")
def preview(ctx: ContextDep, content: Any = Body(..., embed=True)) -> dict[str, Any]:
    """Render an unsaved payload exactly as the public site would."""
    tree = ctx.renderer.render_payload(content)
    data = tree.to_dict()
    data["degraded"] = tree.degraded
    return data
