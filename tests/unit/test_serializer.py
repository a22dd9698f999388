from __future__ import annotations

from datetime import datetime, timezone

import pytest

from workshop_forms.domain import FieldMarker
from workshop_forms.forms.serializer import (
    build_submission_record,
    commit_message,
    parse_record,
    serialize_record,
    storage_folder,
    storage_path,
)
from workshop_forms.forms.state import FormState

MOMENT = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


def _markers(*names: str) -> list[FieldMarker]:
    return [FieldMarker(name=name, declared_type="textarea", ordinal=index) for index, name in enumerate(names)]


def test_single_field_record_layout() -> None:
    state = FormState(["Your Response"])
    state.set("Your Response", "hello")

    record = build_submission_record("Ada Lovelace", "Step 0", "step-0", state, _markers("Your Response"), MOMENT)
    text = serialize_record(record)

    assert text == (
        "Workshop Response\n"
        "================\n"
        "\n"
        "User Name: Ada Lovelace\n"
        "Workshop: Step 0\n"
        "Date: 2025-03-01T09:30:00.000Z\n"
        "\n"
        "Responses:\n"
        "\n"
        "Your Response:\n"
        "hello\n"
        "\n"
    )
    assert "Your Response:\nhello" in text


def test_fields_follow_declaration_order_not_edit_order() -> None:
    markers = _markers("Goal", "Obstacles", "Next step")
    state = FormState(marker.name for marker in markers)
    state.set("Next step", "call Sam")
    state.set("Goal", "ship it")

    record = build_submission_record("Ada", "Step 1", "step-1", state, reversed(markers), MOMENT)

    assert record.fields == (("Goal", "ship it"), ("Obstacles", ""), ("Next step", "call Sam"))
    text = serialize_record(record)
    assert text.index("Goal:") < text.index("Obstacles:") < text.index("Next step:")
    assert text.count("\n---\n") == 2


def test_record_without_fields() -> None:
    record = build_submission_record("Ada", "Intro", "intro", FormState(), [], MOMENT)

    assert record.fields == ()
    assert serialize_record(record).endswith("Responses:\n\n")


def test_parse_record_splits_values_containing_separators() -> None:
    markers = _markers("First", "Second", "Third")
    state = FormState(marker.name for marker in markers)
    state.set("First", "line one\n---\nline two")
    state.set("Third", "\nleading blank line")

    record = build_submission_record("Ada", "Step 2", "step-2", state, markers, MOMENT)

    assert parse_record(serialize_record(record), ["First", "Second", "Third"]) == list(record.fields)


def test_parse_record_rejects_other_text() -> None:
    with pytest.raises(ValueError):
        parse_record("just some notes", ["First"])


def test_storage_path_and_commit_message() -> None:
    record = build_submission_record("Ada Lovelace (UK)", "Step 0", "step-0", FormState(), [], MOMENT)

    assert storage_folder(record) == "responses/Ada_Lovelace__UK__step-0_2025-03-01T09-30-00-000Z"
    assert storage_path(record) == "responses/Ada_Lovelace__UK__step-0_2025-03-01T09-30-00-000Z/response.txt"
    assert commit_message(record) == "Add response from Ada Lovelace (UK) for Step 0"
