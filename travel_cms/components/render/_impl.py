"""
Content block rendering engine.

Turns a loosely-typed content payload into a RenderTree.

Key behaviors:
- Payload shapes: ``{"sections": [...]}``, a single section with ``type``, or a
  bare list; anything else renders as one diagnostic placeholder
- Output order matches input order, one rendered section per input section
- Unknown types and malformed known types become DiagnosticView; rendering
  never raises
- Text HTML is sanitized before it leaves the engine
- Links and images with forbidden URL protocols are dropped

Rendering is pure: no I/O, no clock, no shared state.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from travel_cms.domain.entities import ContentBlock, Page, Post
from travel_cms.domain.sanitize import SanitizerConfig, is_safe_url, sanitize_html
from travel_cms.domain.sections import (
    CtaSection,
    FaqSection,
    FeaturesSection,
    GallerySection,
    HeroSection,
    ImageSection,
    TextSection,
    UnknownSection,
    extract_sections,
    parse_section,
)
from travel_cms.rules.models import RenderRules

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
    RenderedSection,
    RenderTree,
    TextView,
)

ALIGNMENTS = frozenset({"left", "center", "right"})

_COLOR_PATTERN = re.compile(
    r"^(#[0-9a-fA-F]{3,8}|[a-zA-Z]{3,20}|rgba?\(\s*[\d.%\s,]+\))$"
)


# --- Configuration ---


@dataclass(frozen=True)
class RenderConfig:
    default_cta_background: str = "#3B82F6"
    default_faq_title: str = "Frequently Asked Questions"
    sanitize_text: bool = True
    sanitizer: SanitizerConfig = field(default_factory=SanitizerConfig)

    @classmethod
    def from_rules(cls, rules: RenderRules) -> RenderConfig:
        s = rules.sanitizer
        return cls(
            default_cta_background=rules.default_cta_background,
            default_faq_title=rules.default_faq_title,
            sanitize_text=rules.sanitize_text,
            sanitizer=SanitizerConfig(
                allow_tags=frozenset(s.allow_tags),
                allow_attrs={tag: frozenset(attrs) for tag, attrs in s.allow_attrs.items()},
                drop_content_tags=frozenset(s.drop_content_tags),
                forbid_protocols=frozenset(s.forbid_protocols),
                add_noopener=s.add_noopener,
                add_noreferrer=s.add_noreferrer,
            ),
        )


DEFAULT_CONFIG = RenderConfig()


# --- Helpers ---


def _dump(payload: Any) -> str:
    try:
        return json.dumps(payload, indent=2, sort_keys=True, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(payload)


def _diagnostic(payload: Any, reason: str, section_type: str | None = None) -> DiagnosticView:
    return DiagnosticView(reason=reason, raw=_dump(payload), section_type=section_type)


def _safe_url(url: str | None, config: RenderConfig) -> str | None:
    if not url or not url.strip():
        return None
    url = url.strip()
    return url if is_safe_url(url, config.sanitizer) else None


def _call_to_action(
    text: str | None, link: str | None, config: RenderConfig
) -> CallToAction | None:
    # Rendered only when both halves are present.
    safe_link = _safe_url(link, config)
    if not text or not text.strip() or safe_link is None:
        return None
    return CallToAction(text=text, link=safe_link)


# --- Per-type renderers ---


def _render_hero(section: HeroSection, config: RenderConfig) -> HeroView:
    return HeroView(
        title=section.title,
        subtitle=section.subtitle or None,
        background_image=_safe_url(section.background_image, config),
        cta=_call_to_action(section.cta_text, section.cta_link, config),
    )


def _render_text(section: TextSection, config: RenderConfig) -> TextView:
    alignment = section.alignment.lower() if section.alignment else "left"
    if alignment not in ALIGNMENTS:
        alignment = "left"
    if not config.sanitize_text:
        return TextView(html=section.content, alignment=alignment)
    cleaned, warnings = sanitize_html(section.content, config.sanitizer)
    return TextView(
        html=cleaned,
        alignment=alignment,
        warnings=tuple(w.message for w in warnings),
    )


def _render_image(section: ImageSection, config: RenderConfig) -> ImageView | DiagnosticView:
    src = _safe_url(section.src, config)
    if src is None:
        return _diagnostic(
            section.model_dump(by_alias=True), "Image has no usable src", "image"
        )
    return ImageView(src=src, alt=section.alt, caption=section.caption or None)


def _render_gallery(section: GallerySection, config: RenderConfig) -> GalleryView:
    images = []
    for image in section.images:
        src = _safe_url(image.src, config)
        if src is not None:
            images.append(ImageView(src=src, alt=image.alt, caption=image.caption or None))
    return GalleryView(images=tuple(images), title=section.title or None)


def _render_faq(section: FaqSection, config: RenderConfig) -> FaqView:
    return FaqView(
        title=section.title or config.default_faq_title,
        items=tuple(FaqEntry(question=i.question, answer=i.answer) for i in section.items),
    )


def _render_features(section: FeaturesSection, config: RenderConfig) -> FeaturesView:
    return FeaturesView(
        title=section.title or None,
        items=tuple(
            FeatureEntry(title=i.title, description=i.description, icon=i.icon or None)
            for i in section.items
        ),
    )


def _render_cta(section: CtaSection, config: RenderConfig) -> CtaView:
    color = section.background_color
    if not color or not _COLOR_PATTERN.match(color.strip()):
        color = config.default_cta_background
    return CtaView(
        title=section.title,
        description=section.description or None,
        button=_call_to_action(section.button_text, section.button_link, config),
        background_color=color.strip(),
    )


_RENDERERS: dict[type, Any] = {
    HeroSection: _render_hero,
    TextSection: _render_text,
    ImageSection: _render_image,
    GallerySection: _render_gallery,
    FaqSection: _render_faq,
    FeaturesSection: _render_features,
    CtaSection: _render_cta,
}


# --- Public API ---


def render_section(raw: Any, config: RenderConfig = DEFAULT_CONFIG) -> RenderedSection:
    """Render one section; never raises."""
    parsed = parse_section(raw)
    if isinstance(parsed, UnknownSection):
        return _diagnostic(parsed.payload, parsed.reason, parsed.section_type)

    renderer = _RENDERERS.get(type(parsed))
    if renderer is None:
        # Known to the editor but without a display form yet.
        return _diagnostic(
            raw,
            f"Unsupported content block type: {parsed.type}",
            parsed.type,
        )
    try:
        return renderer(parsed, config)  # type: ignore[no-any-return]
    except Exception as e:
        return _diagnostic(raw, f"Failed to render {parsed.type} section: {e}", parsed.type)


def render_content(
    sections: Sequence[Any], config: RenderConfig = DEFAULT_CONFIG
) -> RenderTree:
    """Render an ordered list of sections."""
    return RenderTree(sections=tuple(render_section(s, config) for s in sections))


def render_payload(content: Any, config: RenderConfig = DEFAULT_CONFIG) -> RenderTree:
    """Render a stored content payload of any supported shape."""
    if content is None or (isinstance(content, Mapping) and not content):
        return RenderTree()
    sections = extract_sections(content)
    if sections is None:
        return RenderTree(sections=(_diagnostic(content, "Content has no sections"),))
    return render_content(sections, config)


def render_entity(
    entity: Page | Post | ContentBlock, config: RenderConfig = DEFAULT_CONFIG
) -> RenderTree:
    if isinstance(entity, ContentBlock):
        return render_content([entity.as_section()], config)
    return render_payload(entity.content, config)


def build_metadata(entity: Page | Post) -> PageMetadata:
    """SEO metadata; explicit meta fields win over title and excerpt."""
    if isinstance(entity, Page):
        title = entity.meta_title or entity.title
        description = entity.meta_description
    else:
        title = entity.seo_title or entity.title
        description = entity.seo_description or entity.excerpt
    return PageMetadata(
        title=title,
        description=description or None,
        image=entity.featured_image or None,
        published_at=entity.published_at.isoformat() if entity.published_at else None,
    )


class RenderService:
    """Holds render configuration so callers need not pass it around."""

    def __init__(self, config: RenderConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def render_content(self, sections: Sequence[Any]) -> RenderTree:
        return render_content(sections, self.config)

    def render_payload(self, content: Any) -> RenderTree:
        return render_payload(content, self.config)

    def render_entity(self, entity: Page | Post | ContentBlock) -> RenderTree:
        return render_entity(entity, self.config)


def create_render_service(config: RenderConfig | None = None) -> RenderService:
    return RenderService(config or DEFAULT_CONFIG)
