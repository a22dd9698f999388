from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from ..domain import FieldSlot, RenderSegment
from .state import FormState

STATIC_CLASS = "prose prose-lg max-w-none"
FIELD_CLASS = "workshop-field"


def _field_control(soup: BeautifulSoup, segment: FieldSlot, field_id: str, state: FormState) -> Tag:
    wrapper = soup.new_tag("div", attrs={"class": FIELD_CLASS})

    label = soup.new_tag("label", attrs={"for": field_id})
    label.string = segment.field_name
    wrapper.append(label)

    textarea = soup.new_tag(
        "textarea",
        attrs={
            "id": field_id,
            "name": segment.field_name,
            "data-field-name": segment.field_name,
            "data-input-type": segment.declared_type,
            "placeholder": f"Enter your response for {segment.field_name}",
        },
    )
    # read at render time so every alias of a field shows the latest edit
    textarea.string = state.get(segment.field_name)
    wrapper.append(textarea)
    return wrapper


def render_form(segments: list[RenderSegment], state: FormState, submitting: bool = False) -> str:
    soup = BeautifulSoup("", "lxml")
    parts: list[str] = []
    input_index = 0

    for segment in segments:
        if isinstance(segment, FieldSlot):
            control = _field_control(soup, segment, f"input-{input_index}", state)
            input_index += 1
            parts.append(str(control))
        else:
            parts.append(f'<div class="{STATIC_CLASS}">{segment.html}</div>')

    button = soup.new_tag("button", attrs={"type": "submit"})
    if submitting:
        button["disabled"] = "disabled"
    button.string = "Saving..." if submitting else "Save Response"
    parts.append(str(button))

    return "\n".join(parts)
