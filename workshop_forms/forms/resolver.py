from __future__ import annotations

from dataclasses import dataclass
import html
import re
from typing import Collection

from ..domain import FieldSlot, RenderSegment, StaticMarkup
from .markers import BRACKET_OPENER, BRACKET_PATTERN, COMMENT_PATTERN, PLACEHOLDER_PATTERN, scan_markers


@dataclass(frozen=True)
class PlaceholderStrategy:
    """Locates field positions in rendered markup with one regex."""

    name: str
    pattern: re.Pattern[str]
    unescape_names: bool = False

    def applies_to(self, markup: str) -> bool:
        return self.pattern.search(markup) is not None

    def resolve(self, markup: str, raw_text: str, declared: Collection[str] | None = None) -> list[RenderSegment]:
        segments: list[RenderSegment] = []
        cursor = 0

        for match in self.pattern.finditer(markup):
            name = match.group(2).strip()
            if self.unescape_names:
                name = html.unescape(name)
            # undeclared placeholders stay part of the surrounding static markup
            if declared is not None and name not in declared:
                continue
            _append_static(segments, markup, cursor, match.start())
            segments.append(
                FieldSlot(field_name=name, declared_type=match.group(1), start=match.start(), end=match.end())
            )
            cursor = match.end()

        _append_static(segments, markup, cursor, len(markup))
        return segments


class BracketFallbackStrategy:
    """Markup lost its placeholders but the raw text still declares fields.

    The whole markup stays static and one control per bracket marker is
    appended after it, so no declared field goes missing.
    """

    name = "bracket"

    def applies_to(self, markup: str, raw_text: str) -> bool:
        return bool(scan_markers(raw_text, BRACKET_PATTERN, BRACKET_OPENER).occurrences)

    def resolve(self, markup: str, raw_text: str, declared: Collection[str] | None = None) -> list[RenderSegment]:
        segments: list[RenderSegment] = []
        _append_static(segments, markup, 0, len(markup))
        end = len(markup)
        for occurrence in scan_markers(raw_text, BRACKET_PATTERN, BRACKET_OPENER).occurrences:
            if declared is not None and occurrence.name not in declared:
                continue
            segments.append(
                FieldSlot(field_name=occurrence.name, declared_type=occurrence.declared_type, start=end, end=end)
            )
        return segments


STRUCTURAL = PlaceholderStrategy(name="structural", pattern=PLACEHOLDER_PATTERN, unescape_names=True)
COMMENT = PlaceholderStrategy(name="comment", pattern=COMMENT_PATTERN)
BRACKET_FALLBACK = BracketFallbackStrategy()


def _append_static(segments: list[RenderSegment], markup: str, start: int, end: int) -> None:
    span = markup[start:end]
    if span.strip():
        segments.append(StaticMarkup(html=span, start=start, end=end))


def select_strategy(markup: str, raw_text: str = "") -> PlaceholderStrategy | BracketFallbackStrategy | None:
    for strategy in (STRUCTURAL, COMMENT):
        if strategy.applies_to(markup):
            return strategy
    if raw_text and BRACKET_FALLBACK.applies_to(markup, raw_text):
        return BRACKET_FALLBACK
    return None


def resolve_segments(
    markup: str,
    raw_text: str = "",
    declared: Collection[str] | None = None,
) -> list[RenderSegment]:
    """Split markup into static spans and field slots.

    When `declared` is given, only those field names become slots; anything
    else, such as a marker past a malformed one, renders as static markup.
    """
    strategy = select_strategy(markup, raw_text)
    if strategy is None:
        segments: list[RenderSegment] = []
        _append_static(segments, markup, 0, len(markup))
        return segments
    return strategy.resolve(markup, raw_text, declared)
