"""
Render component models: the typed display tree.

Each rendered section is a frozen dataclass tagged by ``kind``. DiagnosticView
is the placeholder for anything the engine could not render.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

# --- Section views ---


@dataclass(frozen=True)
class CallToAction:
    text: str
    link: str


@dataclass(frozen=True)
class HeroView:
    title: str
    subtitle: str | None = None
    background_image: str | None = None
    cta: CallToAction | None = None
    kind: str = field(default="hero", init=False)


@dataclass(frozen=True)
class TextView:
    html: str
    alignment: str = "left"
    warnings: tuple[str, ...] = ()
    kind: str = field(default="text", init=False)


@dataclass(frozen=True)
class ImageView:
    src: str
    alt: str = ""
    caption: str | None = None
    kind: str = field(default="image", init=False)


@dataclass(frozen=True)
class GalleryView:
    images: tuple[ImageView, ...] = ()
    title: str | None = None
    kind: str = field(default="gallery", init=False)

    @property
    def is_empty(self) -> bool:
        return not self.images


@dataclass(frozen=True)
class FaqEntry:
    question: str
    answer: str


@dataclass(frozen=True)
class FaqView:
    title: str
    items: tuple[FaqEntry, ...] = ()
    kind: str = field(default="faq", init=False)


@dataclass(frozen=True)
class FeatureEntry:
    title: str
    description: str = ""
    icon: str | None = None


@dataclass(frozen=True)
class FeaturesView:
    title: str | None = None
    items: tuple[FeatureEntry, ...] = ()
    kind: str = field(default="features", init=False)


@dataclass(frozen=True)
class CtaView:
    title: str
    description: str | None = None
    button: CallToAction | None = None
    background_color: str = "#3B82F6"
    kind: str = field(default="cta", init=False)


@dataclass(frozen=True)
class DiagnosticView:
    """Placeholder for an unknown or malformed section; echoes the raw payload."""

    reason: str
    raw: str
    section_type: str | None = None
    kind: str = field(default="diagnostic", init=False)


RenderedSection = (
    HeroView
    | TextView
    | ImageView
    | GalleryView
    | FaqView
    | FeaturesView
    | CtaView
    | DiagnosticView
)


@dataclass(frozen=True)
class RenderTree:
    """Ordered display sections, one per input section."""

    sections: tuple[RenderedSection, ...] = ()

    def __len__(self) -> int:
        return len(self.sections)

    @property
    def diagnostics(self) -> list[DiagnosticView]:
        return [s for s in self.sections if isinstance(s, DiagnosticView)]

    @property
    def degraded(self) -> bool:
        return bool(self.diagnostics)

    def to_dict(self) -> dict[str, Any]:
        return {"sections": [asdict(section) for section in self.sections]}


# --- Metadata ---


@dataclass(frozen=True)
class PageMetadata:
    title: str
    description: str | None = None
    image: str | None = None
    published_at: str | None = None


# --- Input / Output ---


@dataclass(frozen=True)
class RenderContentInput:
    """Render a raw content payload (any supported shape)."""

    content: Any


@dataclass(frozen=True)
class RenderEntityInput:
    """Render a stored page, post or content block."""

    entity: Any


@dataclass(frozen=True)
class RenderOutput:
    tree: RenderTree
    metadata: PageMetadata | None = None
