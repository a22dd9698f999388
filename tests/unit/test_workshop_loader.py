from __future__ import annotations

from pathlib import Path

import pytest

from workshop_forms.content import workshops
from workshop_forms.content.workshops import (
    compile_workshop,
    list_workshop_slugs,
    list_workshops,
    load_workshop,
    parse_front_matter,
)
from workshop_forms.domain import FieldSlot
from workshop_forms.errors import DocumentNotFound
from workshop_forms.settings import CONTENT_DIR


def _write(directory: Path, name: str, text: str) -> Path:
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


def test_front_matter_is_split_from_body() -> None:
    data, body = parse_front_matter('---\ntitle: "Step 0"\nslug: step-0\ntags: [a, b]\n---\n\nHello.\n')

    assert data == {"title": "Step 0", "slug": "step-0", "tags": ["a", "b"]}
    assert body == "\nHello.\n"


def test_text_without_front_matter_is_all_body() -> None:
    assert parse_front_matter("Hello.") == ({}, "Hello.")


def test_load_workshop_derives_markers_markup_and_segments(tmp_path) -> None:
    _write(
        tmp_path,
        "reflect.md",
        '---\ntitle: "Reflect"\nslug: reflect\ntags: [closing]\n---\n\nLook back.\n\n[INPUT:textarea:Lessons]\n\nThanks!\n',
    )

    form = load_workshop("reflect", tmp_path)

    assert form.workshop.title == "Reflect"
    assert form.workshop.tags == ("closing",)
    assert form.field_names == ["Lessons"]
    assert 'data-field-name="Lessons"' in form.workshop.html
    assert "[INPUT:textarea:Lessons]" in form.workshop.raw_text
    assert [segment.kind for segment in form.segments] == ["static", "field", "static"]


def test_missing_title_and_slug_fall_back_to_file_name(tmp_path) -> None:
    _write(tmp_path, "option-2.md", "No front matter here.")

    workshop = load_workshop("option-2", tmp_path).workshop

    assert workshop.slug == "option-2"
    assert workshop.title == "Option 2"


def test_unknown_or_escaping_slugs_are_not_found(tmp_path) -> None:
    _write(tmp_path, "outside.md", "secret")
    content_dir = tmp_path / "workshops"
    content_dir.mkdir()

    with pytest.raises(DocumentNotFound):
        load_workshop("missing", content_dir)
    with pytest.raises(DocumentNotFound):
        load_workshop("../outside", content_dir)


def test_listing_is_sorted_and_ignores_other_files(tmp_path) -> None:
    _write(tmp_path, "step-1.md", "---\ntitle: One\n---\nBody")
    _write(tmp_path, "step-0.md", "---\ntitle: Zero\n---\nBody")
    _write(tmp_path, "notes.txt", "not a workshop")

    assert list_workshop_slugs(tmp_path) == ["step-0", "step-1"]
    assert [workshop.title for workshop in list_workshops(tmp_path)] == ["Zero", "One"]
    assert list_workshop_slugs(tmp_path / "absent") == []


def test_compiled_workshops_are_cached_by_content() -> None:
    text = "---\ntitle: Cached\n---\n[INPUT:text:Answer]"

    first = compile_workshop("cached", text)
    again = compile_workshop("cached", text)
    changed = compile_workshop("cached", text + "\n\nMore.")

    assert first is again
    assert changed is not first
    assert changed.field_names == first.field_names


def test_edited_workshop_replaces_its_cache_entry() -> None:
    compile_workshop("edited", "[INPUT:text:Before]")
    latest = compile_workshop("edited", "[INPUT:text:After]")

    _, cached = workshops._compiled["edited"]
    assert cached is latest
    assert cached.field_names == ["After"]
    assert all(isinstance(key, str) for key in workshops._compiled)


def test_blank_field_name_is_malformed_and_every_declared_field_gets_a_control() -> None:
    text = "Intro [INPUT:text:Goal]\n\nMore [INPUT:text:   ]\n\nEnd [INPUT:text:Later]"

    form = compile_workshop("blank-name", text)

    slots = [segment.field_name for segment in form.segments if isinstance(segment, FieldSlot)]
    assert form.field_names == ["Goal"]
    assert slots == ["Goal"]
    assert form.malformed_at == text.index("[INPUT:text:   ]")


def test_comment_markers_after_a_malformed_bracket_stay_static() -> None:
    text = (
        "<!-- INPUT_PLACEHOLDER:textarea:A -->\n\n"
        "Oops [INPUT:text\n\n"
        "<!-- INPUT_PLACEHOLDER:textarea:B -->\n"
    )

    form = compile_workshop("comment-malformed", text)

    slots = [segment.field_name for segment in form.segments if isinstance(segment, FieldSlot)]
    assert form.marker_syntax == "comment"
    assert form.field_names == ["A"]
    assert slots == ["A"]
    assert form.malformed_at == text.index("[INPUT:")


def test_shipped_workshop_with_repeated_field_name() -> None:
    form = load_workshop("step-1", CONTENT_DIR)

    assert form.field_names == ["Situation", "People and needs", "Previous attempts"]
    slots = [segment.field_name for segment in form.segments if isinstance(segment, FieldSlot)]
    assert slots == ["Situation", "People and needs", "Previous attempts", "Situation"]


def test_shipped_workshop_with_comment_placeholders() -> None:
    form = load_workshop("option-1", CONTENT_DIR)

    assert form.marker_syntax == "comment"
    assert form.field_names == ["Experiment", "Signal of success"]
    slots = [segment.field_name for segment in form.segments if isinstance(segment, FieldSlot)]
    assert slots == ["Experiment", "Signal of success"]
