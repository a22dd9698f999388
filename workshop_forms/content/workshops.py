from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import re
from typing import Any

import markdown
import yaml

from ..domain import FieldMarker, RenderSegment, Workshop
from ..errors import DocumentNotFound, MalformedMarker
from ..forms.markers import extract_markers
from ..forms.resolver import resolve_segments
from ..utils import content_hash, title_from_slug

logger = logging.getLogger(__name__)

WORKSHOP_SUFFIX = ".md"
FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
MARKDOWN_EXTENSIONS = ["nl2br"]


@dataclass(frozen=True)
class WorkshopForm:
    """A loaded workshop with everything derived from its text."""

    workshop: Workshop
    markers: tuple[FieldMarker, ...]
    segments: tuple[RenderSegment, ...]
    marker_syntax: str
    malformed_at: int | None = None

    @property
    def field_names(self) -> list[str]:
        return [marker.name for marker in self.markers]


# slug -> (content hash, compiled form); an edited file replaces its entry
_compiled: dict[str, tuple[str, WorkshopForm]] = {}


def parse_front_matter(text: str) -> tuple[dict[str, Any], str]:
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return {}, text
    data = yaml.safe_load(match.group(1)) or {}
    if not isinstance(data, dict):
        data = {}
    return data, text[match.end() :]


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def compile_workshop(slug: str, file_text: str) -> WorkshopForm:
    digest = content_hash(file_text)
    cached = _compiled.get(slug)
    if cached is not None and cached[0] == digest:
        return cached[1]

    data, body = parse_front_matter(file_text)
    extraction = extract_markers(body)
    try:
        extraction.raise_for_malformed()
    except MalformedMarker as exc:
        logger.warning("Workshop %s: %s; the rest renders as static content", slug, exc)

    html = render_markdown(extraction.rewritten_text)
    tags = data.get("tags") or []

    workshop = Workshop(
        slug=str(data.get("slug") or slug),
        title=str(data.get("title") or title_from_slug(slug)),
        raw_text=body,
        html=html,
        tags=tuple(str(tag) for tag in tags) if isinstance(tags, list) else (),
    )
    compiled = WorkshopForm(
        workshop=workshop,
        markers=extraction.markers,
        segments=tuple(resolve_segments(html, body, set(extraction.field_names))),
        marker_syntax=extraction.syntax,
        malformed_at=extraction.malformed_at,
    )
    _compiled[slug] = (digest, compiled)
    return compiled


def list_workshop_slugs(content_dir: Path) -> list[str]:
    if not content_dir.exists():
        return []
    return sorted(path.stem for path in content_dir.glob(f"*{WORKSHOP_SUFFIX}") if path.is_file())


def _workshop_path(slug: str, content_dir: Path) -> Path:
    path = content_dir / f"{slug}{WORKSHOP_SUFFIX}"
    if path.resolve().parent != content_dir.resolve():
        raise DocumentNotFound(slug)
    return path


def load_workshop(slug: str, content_dir: Path) -> WorkshopForm:
    path = _workshop_path(slug, content_dir)
    if not path.is_file():
        raise DocumentNotFound(slug)

    with open(path, "r", encoding="utf-8") as handle:
        file_text = handle.read()
    return compile_workshop(slug, file_text)


def list_workshops(content_dir: Path) -> list[Workshop]:
    workshops: list[Workshop] = []
    for slug in list_workshop_slugs(content_dir):
        try:
            workshops.append(load_workshop(slug, content_dir).workshop)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            logger.error("Skipping workshop %s: %s", slug, exc)
    return workshops
