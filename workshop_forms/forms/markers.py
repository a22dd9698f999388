"""Input marker extraction.

Workshop documents declare their form fields inline. Two syntaxes exist:

* ``[INPUT:<type>:<name>]`` in the Markdown prose (primary).
* ``<!-- INPUT_PLACEHOLDER:<type>:<name> -->`` as a raw HTML comment, only
  consulted when the document holds no bracket markers.

Bracket markers are rewritten into a self-closing placeholder element before
Markdown conversion so their position survives in the rendered HTML.
"""

from __future__ import annotations

from dataclasses import dataclass
import html
import re

from ..domain import FieldMarker
from ..errors import MalformedMarker

BRACKET_OPENER = "[INPUT:"
BRACKET_PATTERN = re.compile(r"\[INPUT:(\w+):([^\]]+)\]")

COMMENT_OPENER = "<!-- INPUT_PLACEHOLDER:"
COMMENT_PATTERN = re.compile(r"<!-- INPUT_PLACEHOLDER:(\w+):([^>]+) -->")

PLACEHOLDER_TEMPLATE = '<div data-input-placeholder="{declared_type}" data-field-name="{name}"></div>'
PLACEHOLDER_PATTERN = re.compile(r'<div data-input-placeholder="(\w+)" data-field-name="([^"]+)"></div>')


@dataclass(frozen=True)
class MarkerOccurrence:
    name: str
    declared_type: str
    start: int
    end: int


@dataclass(frozen=True)
class MarkerScan:
    occurrences: tuple[MarkerOccurrence, ...]
    malformed_at: int | None


@dataclass(frozen=True)
class MarkerExtraction:
    markers: tuple[FieldMarker, ...]
    rewritten_text: str
    syntax: str
    malformed_at: int | None = None

    @property
    def field_names(self) -> list[str]:
        return [marker.name for marker in self.markers]

    def raise_for_malformed(self) -> None:
        if self.malformed_at is not None:
            raise MalformedMarker(self.malformed_at)


def placeholder_for(declared_type: str, name: str) -> str:
    return PLACEHOLDER_TEMPLATE.format(declared_type=declared_type, name=html.escape(name, quote=True))


def scan_markers(text: str, pattern: re.Pattern[str], opener: str) -> MarkerScan:
    """Find every complete marker, stopping at the first malformed one.

    An opener counts as malformed when it is never terminated or when its name
    is blank after trimming.
    """
    occurrences: list[MarkerOccurrence] = []
    cursor = 0

    for opener_match in re.finditer(re.escape(opener), text):
        position = opener_match.start()
        if position < cursor:
            continue

        match = pattern.match(text, position)
        if match is None or not match.group(2).strip():
            return MarkerScan(occurrences=tuple(occurrences), malformed_at=position)

        occurrences.append(
            MarkerOccurrence(
                name=match.group(2).strip(),
                declared_type=match.group(1),
                start=match.start(),
                end=match.end(),
            )
        )
        cursor = match.end()

    return MarkerScan(occurrences=tuple(occurrences), malformed_at=None)


def build_registry(occurrences: tuple[MarkerOccurrence, ...]) -> tuple[FieldMarker, ...]:
    registry: dict[str, FieldMarker] = {}
    for ordinal, occurrence in enumerate(occurrences):
        if occurrence.name in registry:
            continue
        registry[occurrence.name] = FieldMarker(
            name=occurrence.name,
            declared_type=occurrence.declared_type,
            ordinal=ordinal,
        )
    return tuple(registry.values())


def _rewrite_brackets(text: str, occurrences: tuple[MarkerOccurrence, ...]) -> str:
    parts: list[str] = []
    cursor = 0
    for occurrence in occurrences:
        parts.append(text[cursor : occurrence.start])
        parts.append(f"\n\n{placeholder_for(occurrence.declared_type, occurrence.name)}\n\n")
        cursor = occurrence.end
    parts.append(text[cursor:])
    return "".join(parts)


def extract_markers(text: str) -> MarkerExtraction:
    bracket_scan = scan_markers(text, BRACKET_PATTERN, BRACKET_OPENER)
    if bracket_scan.occurrences:
        return MarkerExtraction(
            markers=build_registry(bracket_scan.occurrences),
            rewritten_text=_rewrite_brackets(text, bracket_scan.occurrences),
            syntax="bracket",
            malformed_at=bracket_scan.malformed_at,
        )

    searchable = text if bracket_scan.malformed_at is None else text[: bracket_scan.malformed_at]
    comment_scan = scan_markers(searchable, COMMENT_PATTERN, COMMENT_OPENER)
    malformed_at = comment_scan.malformed_at if comment_scan.malformed_at is not None else bracket_scan.malformed_at

    if comment_scan.occurrences:
        return MarkerExtraction(
            markers=build_registry(comment_scan.occurrences),
            rewritten_text=text,
            syntax="comment",
            malformed_at=malformed_at,
        )

    return MarkerExtraction(markers=(), rewritten_text=text, syntax="none", malformed_at=malformed_at)
