"""
Content editor - builds and edits section payloads.

The editor works on a private copy of a content payload and hands back a new
payload from to_content(); nothing is written until the caller stores it.

Key behaviors:
- New sections start from per-type defaults in the renderer's schema
- Unknown section types are kept verbatim and stay editable field by field
- Changing a section's type resets it to the new type's defaults
- Reusable content blocks are inlined as copies (with their source id)
- JSON import is all-or-nothing: invalid input leaves the editor untouched
"""

from __future__ import annotations

import copy
import json
from typing import Any

from travel_cms.domain.entities import BlockType, ContentBlock, Page, Post
from travel_cms.domain.errors import ValidationError
from travel_cms.domain.sections import LIST_FIELDS, extract_sections, section_errors

from .models import DEFAULT_LIST_ITEMS, DEFAULT_SECTIONS, SectionIssue


def default_section(section_type: str) -> dict[str, Any]:
    defaults = DEFAULT_SECTIONS.get(section_type)
    if defaults is None:
        raise ValidationError(
            code="section_type_invalid",
            message=f"Unknown section type '{section_type}'",
            field="type",
        )
    return {"type": section_type, **copy.deepcopy(defaults)}


def _split_payload(content: Any) -> tuple[list[dict[str, Any]], dict[str, Any]]:
    """Return (sections, other top-level keys) for a stored payload."""
    if content is None or content == {}:
        return [], {}
    sections = extract_sections(content)
    if sections is None:
        raise ValidationError(
            code="content_unstructured",
            message="Content has no sections to edit",
            field="content",
        )
    extra: dict[str, Any] = {}
    if isinstance(content, dict) and isinstance(content.get("sections"), list):
        extra = {k: v for k, v in content.items() if k != "sections"}
    return copy.deepcopy(sections), copy.deepcopy(extra)


class ContentEditor:
    def __init__(self, content: Any = None) -> None:
        self._sections, self._extra = _split_payload(content)

    @classmethod
    def from_entity(cls, entity: Page | Post) -> ContentEditor:
        return cls(entity.content)

    # --- Reading ---

    def __len__(self) -> int:
        return len(self._sections)

    @property
    def sections(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._sections)

    def section(self, index: int) -> dict[str, Any]:
        return copy.deepcopy(self._at(index))

    def to_content(self) -> dict[str, Any]:
        return {**copy.deepcopy(self._extra), "sections": copy.deepcopy(self._sections)}

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_content(), indent=indent, ensure_ascii=False)

    def validate(self) -> list[SectionIssue]:
        issues = []
        for index, section in enumerate(self._sections):
            section_type = section.get("type") if isinstance(section, dict) else None
            for message in section_errors(section):
                issues.append(SectionIssue(index=index, message=message, section_type=section_type))
        return issues

    # --- Sections ---

    def add_section(
        self, section_type: BlockType | str, index: int | None = None, **fields: Any
    ) -> int:
        """Add a section with default content; returns its position."""
        section = default_section(section_type)
        section.update(copy.deepcopy(fields))
        return self._insert(section, index)

    def update_section(self, index: int, field: str, value: Any) -> None:
        if field == "type":
            self.change_type(index, value)
            return
        self._at(index)[field] = copy.deepcopy(value)

    def change_type(self, index: int, new_type: str) -> None:
        current = self._at(index)
        if current.get("type") == new_type:
            return
        self._sections[index] = default_section(new_type)

    def remove_section(self, index: int) -> dict[str, Any]:
        self._at(index)
        return self._sections.pop(index)

    def move_section(self, from_index: int, to_index: int) -> None:
        section = self.remove_section(from_index)
        to_index = max(0, min(to_index, len(self._sections)))
        self._sections.insert(to_index, section)

    def insert_block(self, block: ContentBlock, index: int | None = None) -> int:
        """Inline a reusable block as an independent copy."""
        section = block.as_section()
        section["sourceBlockId"] = str(block.id)
        return self._insert(copy.deepcopy(section), index)

    # --- List items ---

    def add_list_item(self, index: int, item: Any = None) -> int:
        items = self._items(index)
        section_type = self._at(index).get("type", "")
        if item is None:
            item = copy.deepcopy(DEFAULT_LIST_ITEMS.get(section_type, {}))
        items.append(copy.deepcopy(item))
        return len(items) - 1

    def update_list_item(self, index: int, item_index: int, field: str, value: Any) -> None:
        items = self._items(index)
        item = self._item(items, index, item_index)
        if not isinstance(item, dict):
            # Plain-string items are upgraded to objects on first edit.
            key = "question" if self._at(index).get("type") == "faq" else "title"
            item = {key: item}
            items[item_index] = item
        item[field] = copy.deepcopy(value)

    def remove_list_item(self, index: int, item_index: int) -> Any:
        items = self._items(index)
        self._item(items, index, item_index)
        return items.pop(item_index)

    # --- JSON view ---

    def load_json(self, text: str) -> None:
        """Replace the editor contents from JSON text."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(
                code="invalid_json",
                message=f"Invalid JSON: {e.msg} (line {e.lineno})",
                field="content",
            ) from e
        self._sections, self._extra = _split_payload(data)

    @classmethod
    def from_json(cls, text: str) -> ContentEditor:
        editor = cls()
        editor.load_json(text)
        return editor

    # --- Helpers ---

    def _insert(self, section: dict[str, Any], index: int | None) -> int:
        if index is None or index >= len(self._sections):
            self._sections.append(section)
            return len(self._sections) - 1
        index = max(0, index)
        self._sections.insert(index, section)
        return index

    def _at(self, index: int) -> dict[str, Any]:
        if not 0 <= index < len(self._sections):
            raise ValidationError(
                code="section_index_out_of_range",
                message=f"No section at position {index}",
                field=f"sections[{index}]",
            )
        section = self._sections[index]
        if not isinstance(section, dict):
            raise ValidationError(
                code="section_not_editable",
                message=f"Section at position {index} is not an object",
                field=f"sections[{index}]",
            )
        return section

    def _items(self, index: int) -> list[Any]:
        section = self._at(index)
        list_field = LIST_FIELDS.get(section.get("type", ""))
        if list_field is None:
            raise ValidationError(
                code="section_has_no_items",
                message=f"Section at position {index} has no item list",
                field=f"sections[{index}]",
            )
        items = section.get(list_field)
        if not isinstance(items, list):
            items = []
            section[list_field] = items
        return items

    def _item(self, items: list[Any], index: int, item_index: int) -> Any:
        if not 0 <= item_index < len(items):
            raise ValidationError(
                code="item_index_out_of_range",
                message=f"No item at position {item_index}",
                field=f"sections[{index}].items[{item_index}]",
            )
        return items[item_index]
