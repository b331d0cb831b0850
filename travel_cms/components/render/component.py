"""
Render component - content payload to typed display tree.

Invariants:
- Output is one rendered section per input section, in input order
- Rendering never raises; degraded sections are DiagnosticView entries
- Text section HTML is sanitized
"""

from __future__ import annotations

from travel_cms.domain.entities import ContentBlock, Page, Post

from ._impl import DEFAULT_CONFIG, RenderConfig, build_metadata, render_entity, render_payload
from .models import RenderContentInput, RenderEntityInput, RenderOutput


def run_render_content(
    inp: RenderContentInput, *, config: RenderConfig = DEFAULT_CONFIG
) -> RenderOutput:
    return RenderOutput(tree=render_payload(inp.content, config))


def run_render_entity(
    inp: RenderEntityInput, *, config: RenderConfig = DEFAULT_CONFIG
) -> RenderOutput:
    entity = inp.entity
    if isinstance(entity, (Page, Post)):
        return RenderOutput(tree=render_entity(entity, config), metadata=build_metadata(entity))
    if isinstance(entity, ContentBlock):
        return RenderOutput(tree=render_entity(entity, config))
    raise ValueError(f"Cannot render {type(entity).__name__}")


def run(
    inp: RenderContentInput | RenderEntityInput,
    *,
    config: RenderConfig = DEFAULT_CONFIG,
) -> RenderOutput:
    """Main entry point for the render component."""
    if isinstance(inp, RenderContentInput):
        return run_render_content(inp, config=config)
    elif isinstance(inp, RenderEntityInput):
        return run_render_entity(inp, config=config)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
