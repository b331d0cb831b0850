"""
Render component - content payload to typed display tree.
"""

from ._impl import (
    RenderConfig,
    RenderService,
    build_metadata,
    create_render_service,
    render_content,
    render_entity,
    render_payload,
    render_section,
)
from .component import run, run_render_content, run_render_entity
from .models import (
    CallToAction,
    CtaView,
    DiagnosticView,
    FaqEntry,
    FaqView,
    FeatureEntry,
    FeaturesView,
    GalleryView,
    HeroView,
    ImageView,
    PageMetadata,
    RenderContentInput,
    RenderedSection,
    RenderEntityInput,
    RenderOutput,
    RenderTree,
    TextView,
)

__all__ = [
    # Entry points
    "run",
    "run_render_content",
    "run_render_entity",
    # Functions
    "build_metadata",
    "render_content",
    "render_entity",
    "render_payload",
    "render_section",
    # Service
    "RenderConfig",
    "RenderService",
    "create_render_service",
    # Input / output
    "RenderContentInput",
    "RenderEntityInput",
    "RenderOutput",
    # Views
    "CallToAction",
    "CtaView",
    "DiagnosticView",
    "FaqEntry",
    "FaqView",
    "FeatureEntry",
    "FeaturesView",
    "GalleryView",
    "HeroView",
    "ImageView",
    "PageMetadata",
    "RenderedSection",
    "RenderTree",
    "TextView",
]
