from __future__ import annotations

from bs4 import BeautifulSoup

from workshop_forms.domain import FieldSlot, StaticMarkup
from workshop_forms.forms.render import render_form
from workshop_forms.forms.state import FormState


def _segments() -> list:
    return [
        StaticMarkup(html="<p>Intro.</p>", start=0, end=13),
        FieldSlot(field_name="Notes", declared_type="textarea", start=13, end=90),
        StaticMarkup(html="<p>Again:</p>", start=90, end=103),
        FieldSlot(field_name="Notes", declared_type="textarea", start=103, end=180),
    ]


def test_form_state_defaults_and_verbatim_values() -> None:
    state = FormState(["Notes", "Plan"])

    assert state.get("Notes") == ""
    assert state.get("Undeclared") == ""

    state.set("Notes", "  keep\n my spacing  ")
    state.set("Undeclared", "still stored")

    assert state.get("Notes") == "  keep\n my spacing  "
    assert state.values() == {"Notes": "  keep\n my spacing  ", "Plan": "", "Undeclared": "still stored"}


def test_clear_keeps_declared_fields_with_empty_values() -> None:
    state = FormState(["Notes"])
    state.set("Notes", "draft")

    state.clear()

    assert state.values() == {"Notes": ""}
    assert "Notes" in state


def test_render_reads_values_from_state_for_every_alias() -> None:
    state = FormState(["Notes"])
    state.set("Notes", "hello <b>world</b>")

    soup = BeautifulSoup(render_form(_segments(), state), "lxml")
    textareas = soup.find_all("textarea")

    assert [area["name"] for area in textareas] == ["Notes", "Notes"]
    assert [area.get_text() for area in textareas] == ["hello <b>world</b>", "hello <b>world</b>"]
    assert [area["id"] for area in textareas] == ["input-0", "input-1"]
    assert soup.find("label", attrs={"for": "input-0"}).get_text() == "Notes"
    assert "Intro." in soup.get_text()


def test_render_reflects_later_edits_without_rebuilding_segments() -> None:
    state = FormState(["Notes"])
    segments = _segments()

    render_form(segments, state)
    state.set("Notes", "edited")
    soup = BeautifulSoup(render_form(segments, state), "lxml")

    assert soup.find("textarea").get_text() == "edited"


def test_submit_button_is_disabled_while_submitting() -> None:
    state = FormState(["Notes"])

    idle = BeautifulSoup(render_form(_segments(), state), "lxml").find("button")
    busy = BeautifulSoup(render_form(_segments(), state, submitting=True), "lxml").find("button")

    assert not idle.has_attr("disabled")
    assert idle.get_text() == "Save Response"
    assert busy.has_attr("disabled")
    assert busy.get_text() == "Saving..."
