from datetime import UTC, datetime
from typing import Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, computed_field, field_validator

from travel_cms.domain.errors import ValidationError

# --- Enums / Literals ---
Collection = Literal["pages", "posts", "content_blocks"]
ContentStatus = Literal["draft", "scheduled", "published", "archived"]
PageType = Literal[
    "study_malaysia",
    "travel_packages",
    "faqs",
    "travel_accessories",
    "esim",
    "visa_services",
    "education",
    "general",
]
BlockType = Literal[
    "hero",
    "text",
    "image",
    "gallery",
    "faq",
    "features",
    "testimonials",
    "cta",
    "form",
    "video",
]

CONTENT_STATUSES: tuple[ContentStatus, ...] = ("draft", "scheduled", "published", "archived")
PUBLISHABLE_COLLECTIONS: tuple[Collection, ...] = ("pages", "posts")


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    # Naive timestamps are treated as UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def empty_content() -> dict[str, Any]:
    return {"sections": []}


# --- Publishable content ---

class PublishableContent(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    content: dict[str, Any] = Field(default_factory=empty_content)
    status: ContentStatus = "draft"

    scheduled_at: datetime | None = None
    published_at: datetime | None = None

    featured_image: str | None = None
    author_id: UUID | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("scheduled_at", "published_at", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class Page(PublishableContent):
    page_type: PageType = "general"
    meta_title: str | None = None
    meta_description: str | None = None


class Post(PublishableContent):
    excerpt: str | None = None
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    seo_title: str | None = None
    seo_description: str | None = None

    @field_validator("content", mode="before")
    @classmethod
    def _legacy_body(cls, value: Any) -> Any:
        # Older posts stored the body as a plain HTML string.
        if isinstance(value, str):
            return {"sections": [{"type": "text", "content": value}]}
        return value

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        seen: dict[str, None] = {}
        for tag in value:
            tag = tag.strip()
            if tag:
                seen.setdefault(tag, None)
        return list(seen)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def published(self) -> bool:
        return self.status == "published"


# --- Reusable blocks ---

class ContentBlock(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1)
    type: BlockType
    content: dict[str, Any] = Field(default_factory=dict)
    is_global: bool = False
    created_by: UUID | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)  # type: ignore[return-value]

    def as_section(self) -> dict[str, Any]:
        """Section payload equivalent to this block, ready to place in a page."""
        section = dict(self.content)
        section["type"] = self.type
        return section


Entity = Page | Post | ContentBlock

ENTITY_TYPES: dict[Collection, type[Page] | type[Post] | type[ContentBlock]] = {
    "pages": Page,
    "posts": Post,
    "content_blocks": ContentBlock,
}


def entity_type(collection: str) -> type[Page] | type[Post] | type[ContentBlock]:
    try:
        return ENTITY_TYPES[collection]  # type: ignore[index]
    except KeyError:
        raise ValidationError(
            code="unknown_collection",
            message=f"Unknown collection '{collection}'",
            field="collection",
        ) from None
