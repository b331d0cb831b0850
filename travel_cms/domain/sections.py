"""
Content section schema.

A content payload is an ordered list of sections, each a JSON object tagged by
its ``type``. Known types parse into the pydantic models below; anything that
does not parse (no type, unknown type, malformed fields) becomes an
``UnknownSection`` carrying the raw payload so nothing is lost or raised.

Field names follow the stored JSON (camelCase aliases) so payloads written by
older editors keep working.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

# --- Item models ---


class _Schema(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class GalleryImage(_Schema):
    src: str
    alt: str = ""
    caption: str | None = None


class FaqItem(_Schema):
    question: str
    answer: str = ""

    @model_validator(mode="before")
    @classmethod
    def _from_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"question": value}
        return value


class FeatureItem(_Schema):
    icon: str | None = None
    title: str = ""
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def _from_text(cls, value: Any) -> Any:
        # Early editor versions stored plain feature names.
        if isinstance(value, str):
            return {"title": value}
        return value


class TestimonialItem(_Schema):
    name: str = ""
    content: str = ""
    rating: int | None = None
    avatar: str | None = None


# --- Section models ---


class HeroSection(_Schema):
    type: Literal["hero"]
    title: str = ""
    subtitle: str | None = None
    background_image: str | None = Field(default=None, alias="backgroundImage")
    cta_text: str | None = Field(default=None, alias="ctaText")
    cta_link: str | None = Field(default=None, alias="ctaLink")


class TextSection(_Schema):
    type: Literal["text"]
    content: str = ""
    alignment: str = "left"


class ImageSection(_Schema):
    type: Literal["image"]
    src: str
    alt: str = ""
    caption: str | None = None


class GallerySection(_Schema):
    type: Literal["gallery"]
    title: str | None = None
    images: list[GalleryImage] = Field(default_factory=list)


class FaqSection(_Schema):
    type: Literal["faq"]
    title: str | None = None
    items: list[FaqItem] = Field(default_factory=list)


class FeaturesSection(_Schema):
    type: Literal["features"]
    title: str | None = None
    items: list[FeatureItem] = Field(default_factory=list)


class CtaSection(_Schema):
    type: Literal["cta"]
    title: str = ""
    description: str | None = None
    button_text: str | None = Field(default=None, alias="buttonText")
    button_link: str | None = Field(default=None, alias="buttonLink")
    background_color: str | None = Field(default=None, alias="backgroundColor")


class TestimonialsSection(_Schema):
    type: Literal["testimonials"]
    title: str | None = None
    items: list[TestimonialItem] = Field(default_factory=list)


class FormSection(_Schema):
    type: Literal["form"]
    title: str | None = None
    form_fields: list[dict[str, Any]] = Field(default_factory=list, alias="fields")
    submit_text: str = Field(default="Submit", alias="submitText")


class VideoSection(_Schema):
    type: Literal["video"]
    src: str = ""
    title: str | None = None
    description: str | None = None
    thumbnail: str | None = None


KnownSection = (
    HeroSection
    | TextSection
    | ImageSection
    | GallerySection
    | FaqSection
    | FeaturesSection
    | CtaSection
    | TestimonialsSection
    | FormSection
    | VideoSection
)

SECTION_MODELS: dict[str, type[_Schema]] = {
    "hero": HeroSection,
    "text": TextSection,
    "image": ImageSection,
    "gallery": GallerySection,
    "faq": FaqSection,
    "features": FeaturesSection,
    "cta": CtaSection,
    "testimonials": TestimonialsSection,
    "form": FormSection,
    "video": VideoSection,
}

# Sections whose payload holds an editable list of items.
LIST_FIELDS: dict[str, str] = {
    "gallery": "images",
    "faq": "items",
    "features": "items",
    "testimonials": "items",
}


@dataclass(frozen=True)
class UnknownSection:
    """A section that could not be parsed; payload is kept verbatim."""

    payload: Any
    reason: str
    section_type: str | None = None


ParsedSection = KnownSection | UnknownSection


def parse_section(raw: Any) -> ParsedSection:
    if not isinstance(raw, Mapping):
        return UnknownSection(payload=raw, reason="Section is not an object")

    section_type = raw.get("type")
    if not isinstance(section_type, str) or not section_type:
        return UnknownSection(payload=dict(raw), reason="Section has no type")

    model = SECTION_MODELS.get(section_type)
    if model is None:
        return UnknownSection(
            payload=dict(raw),
            reason=f"Unsupported content block type: {section_type}",
            section_type=section_type,
        )

    try:
        return model.model_validate(dict(raw))  # type: ignore[return-value]
    except PydanticValidationError as e:
        return UnknownSection(
            payload=dict(raw),
            reason=f"Invalid {section_type} section: {_first_error(e)}",
            section_type=section_type,
        )


def section_errors(raw: Any) -> list[str]:
    """Schema problems for one section; empty when it parses cleanly."""
    parsed = parse_section(raw)
    if isinstance(parsed, UnknownSection):
        return [parsed.reason]
    return []


def extract_sections(content: Any) -> list[Any] | None:
    """
    Pull the ordered section list out of a stored content payload.

    Accepts three shapes: ``{"sections": [...]}``, a single section object with
    a ``type`` key, or a bare list. Returns None for anything else.
    """
    if isinstance(content, list):
        return list(content)
    if isinstance(content, Mapping):
        sections = content.get("sections")
        if isinstance(sections, list):
            return list(sections)
        if "type" in content:
            return [dict(content)]
    return None


def _first_error(exc: PydanticValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else err["msg"]
