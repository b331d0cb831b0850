"""
Editor defaults and issue model.

Default payloads use the same field names the renderer reads, so a freshly
added section always renders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_SECTIONS: dict[str, dict[str, Any]] = {
    "hero": {
        "title": "Hero Title",
        "subtitle": "Hero subtitle text",
        "backgroundImage": "",
        "ctaText": "Call to Action",
        "ctaLink": "#",
    },
    "text": {
        "content": "<p>Your text content here...</p>",
        "alignment": "left",
    },
    "image": {
        "src": "",
        "alt": "Image description",
        "caption": "",
    },
    "gallery": {
        "images": [{"src": "", "alt": "", "caption": ""}],
    },
    "faq": {
        "title": "Frequently Asked Questions",
        "items": [{"question": "Sample question?", "answer": "Sample answer."}],
    },
    "features": {
        "title": "Features",
        "items": [{"title": "Feature 1", "description": "Feature description", "icon": ""}],
    },
    "testimonials": {
        "title": "What Our Customers Say",
        "items": [{"name": "Customer Name", "content": "Testimonial content", "rating": 5}],
    },
    "cta": {
        "title": "Call to Action Title",
        "description": "Call to action description",
        "buttonText": "Get Started",
        "buttonLink": "#",
        "backgroundColor": "#3B82F6",
    },
    "form": {
        "title": "Contact Form",
        "fields": [
            {"name": "name", "label": "Name", "type": "text", "required": True},
            {"name": "email", "label": "Email", "type": "email", "required": True},
        ],
        "submitText": "Submit",
    },
    "video": {
        "src": "",
        "title": "Video Title",
        "description": "Video description",
        "thumbnail": "",
    },
}

DEFAULT_LIST_ITEMS: dict[str, dict[str, Any]] = {
    "gallery": {"src": "", "alt": "", "caption": ""},
    "faq": {"question": "New question?", "answer": ""},
    "features": {"title": "New feature", "description": "", "icon": ""},
    "testimonials": {"name": "", "content": "", "rating": 5},
}


@dataclass(frozen=True)
class SectionIssue:
    """A schema problem found in one section."""

    index: int
    message: str
    section_type: str | None = None
