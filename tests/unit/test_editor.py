"""Tests for the content editor."""

from __future__ import annotations

import json

import pytest

from travel_cms.components.editor import ContentEditor, default_section
from travel_cms.components.render import DiagnosticView, render_payload
from travel_cms.domain.entities import ContentBlock, Page
from travel_cms.domain.errors import ValidationError


@pytest.fixture
def editor() -> ContentEditor:
    return ContentEditor({"sections": [{"type": "hero", "title": "Welcome"}], "version": 2})


class TestLoading:
    def test_empty(self) -> None:
        assert len(ContentEditor()) == 0
        assert ContentEditor().to_content() == {"sections": []}

    def test_extra_keys_preserved(self, editor: ContentEditor) -> None:
        assert editor.to_content()["version"] == 2

    def test_single_block_shape(self) -> None:
        editor = ContentEditor({"type": "text", "content": "x"})
        assert editor.to_content() == {"sections": [{"type": "text", "content": "x"}]}

    def test_unstructured_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc:
            ContentEditor({"body": "x"})
        assert exc.value.code == "content_unstructured"

    def test_from_entity(self) -> None:
        page = Page(title="T", slug="t", content={"sections": [{"type": "text"}]})
        assert len(ContentEditor.from_entity(page)) == 1

    def test_does_not_alias_input(self) -> None:
        content = {"sections": [{"type": "hero", "title": "A"}]}
        editor = ContentEditor(content)
        editor.update_section(0, "title", "B")
        assert content["sections"][0]["title"] == "A"


class TestSections:
    def test_add_with_defaults(self, editor: ContentEditor) -> None:
        index = editor.add_section("cta")
        section = editor.section(index)
        assert index == 1
        assert section["type"] == "cta"
        assert section["backgroundColor"] == "#3B82F6"

    def test_add_at_position_with_fields(self, editor: ContentEditor) -> None:
        editor.add_section("text", index=0, content="<p>Intro</p>")
        assert editor.sections[0] == {
            "type": "text",
            "content": "<p>Intro</p>",
            "alignment": "left",
        }

    def test_add_unknown_type(self, editor: ContentEditor) -> None:
        with pytest.raises(ValidationError) as exc:
            editor.add_section("carousel")
        assert exc.value.code == "section_type_invalid"

    def test_default_sections_render(self) -> None:
        for section_type in ("hero", "text", "gallery", "faq", "features", "cta"):
            tree = render_payload({"sections": [default_section(section_type)]})
            assert not tree.degraded, section_type

    def test_update_field(self, editor: ContentEditor) -> None:
        editor.update_section(0, "subtitle", "Asia awaits")
        assert editor.section(0)["subtitle"] == "Asia awaits"

    def test_change_type_resets(self, editor: ContentEditor) -> None:
        editor.update_section(0, "type", "faq")
        section = editor.section(0)
        assert section["type"] == "faq"
        assert "title" in section and section["title"] == "Frequently Asked Questions"

    def test_change_to_same_type_keeps_fields(self, editor: ContentEditor) -> None:
        editor.change_type(0, "hero")
        assert editor.section(0)["title"] == "Welcome"

    def test_remove(self, editor: ContentEditor) -> None:
        removed = editor.remove_section(0)
        assert removed["title"] == "Welcome"
        assert len(editor) == 0

    def test_move(self, editor: ContentEditor) -> None:
        editor.add_section("text")
        editor.add_section("cta")
        editor.move_section(0, 2)
        assert [s["type"] for s in editor.sections] == ["text", "cta", "hero"]
        editor.move_section(2, -5)
        assert [s["type"] for s in editor.sections] == ["hero", "text", "cta"]

    def test_index_out_of_range(self, editor: ContentEditor) -> None:
        with pytest.raises(ValidationError) as exc:
            editor.update_section(3, "title", "x")
        assert exc.value.code == "section_index_out_of_range"

    def test_unknown_section_still_editable(self) -> None:
        editor = ContentEditor({"sections": [{"type": "mystery", "x": 1}]})
        editor.update_section(0, "x", 2)
        assert editor.section(0) == {"type": "mystery", "x": 2}

    def test_insert_block(self, editor: ContentEditor) -> None:
        block = ContentBlock(name="Promo", type="cta", content={"title": "Sale"}, is_global=True)
        index = editor.insert_block(block, index=0)
        section = editor.section(index)
        assert section == {"title": "Sale", "type": "cta", "sourceBlockId": str(block.id)}

    def test_validate(self) -> None:
        editor = ContentEditor(
            {"sections": [{"type": "text"}, {"type": "image"}, {"type": "mystery"}]}
        )
        issues = editor.validate()
        assert [i.index for i in issues] == [1, 2]
        assert issues[1].section_type == "mystery"


class TestListItems:
    def test_add_default_item(self) -> None:
        editor = ContentEditor()
        editor.add_section("faq")
        item_index = editor.add_list_item(0)
        item = editor.section(0)["items"][item_index]
        assert item == {"question": "New question?", "answer": ""}

    def test_update_upgrades_string_item(self) -> None:
        editor = ContentEditor({"sections": [{"type": "features", "items": ["Wifi"]}]})
        editor.update_list_item(0, 0, "description", "Free everywhere")
        assert editor.section(0)["items"][0] == {"title": "Wifi", "description": "Free everywhere"}

    def test_remove_item(self) -> None:
        editor = ContentEditor({"sections": [{"type": "gallery", "images": [{"src": "/a.jpg"}]}]})
        assert editor.remove_list_item(0, 0) == {"src": "/a.jpg"}
        assert editor.section(0)["images"] == []

    def test_no_items_on_hero(self, editor: ContentEditor) -> None:
        with pytest.raises(ValidationError) as exc:
            editor.add_list_item(0)
        assert exc.value.code == "section_has_no_items"

    def test_item_out_of_range(self) -> None:
        editor = ContentEditor({"sections": [{"type": "faq", "items": []}]})
        with pytest.raises(ValidationError) as exc:
            editor.remove_list_item(0, 0)
        assert exc.value.code == "item_index_out_of_range"


class TestJson:
    def test_round_trip(self, editor: ContentEditor) -> None:
        assert ContentEditor.from_json(editor.to_json()).to_content() == editor.to_content()

    def test_invalid_json_leaves_editor(self, editor: ContentEditor) -> None:
        before = editor.to_content()
        with pytest.raises(ValidationError) as exc:
            editor.load_json('{"sections": [')
        assert exc.value.code == "invalid_json"
        assert editor.to_content() == before

    def test_load_replaces(self, editor: ContentEditor) -> None:
        editor.load_json(json.dumps([{"type": "mystery"}]))
        assert len(editor) == 1
        tree = render_payload(editor.to_content())
        assert isinstance(tree.sections[0], DiagnosticView)
