from __future__ import annotations

from pathlib import Path
import re

from pypdf import PdfReader
import yaml

from ..forms.markers import BRACKET_OPENER
from ..utils import slugify, title_from_slug

EXCESS_NEWLINES = re.compile(r"\n{3,}")
DEFAULT_INPUT_MARKER = "[INPUT:textarea:Your Response]"


def read_pdf_text(pdf_path: str | Path, max_pages: int | None = None) -> str:
    reader = PdfReader(str(pdf_path))
    total_pages = len(reader.pages)
    limit = min(total_pages, max_pages) if max_pages else total_pages

    pages: list[str] = []
    for index in range(limit):
        pages.append(reader.pages[index].extract_text() or "")
    return "\n".join(pages)


def _is_name_prompt(line: str) -> bool:
    return "your name" in line.lower()


def workshop_markdown_from_text(text: str, slug: str) -> str:
    content = EXCESS_NEWLINES.sub("\n\n", text).strip()
    lines = [line.strip() for line in content.split("\n")]
    lines = [line for line in lines if line]

    title = lines[0] if lines else title_from_slug(slug)
    body_lines = [line for line in lines[1:] if not _is_name_prompt(line)]

    body = "\n\n".join(body_lines)
    if BRACKET_OPENER not in body:
        body = f"{body}\n\n{DEFAULT_INPUT_MARKER}" if body else DEFAULT_INPUT_MARKER

    front_matter = yaml.safe_dump({"title": title, "slug": slug, "tags": []}, sort_keys=False, allow_unicode=True)
    return f"---\n{front_matter}---\n\n{body}\n"


def extract_workshop_markdown(pdf_path: str | Path, slug: str, max_pages: int | None = None) -> str:
    return workshop_markdown_from_text(read_pdf_text(pdf_path, max_pages=max_pages), slug)


def write_workshop_from_pdf(pdf_path: str | Path, content_dir: Path, slug: str | None = None) -> Path:
    source = Path(pdf_path)
    effective_slug = slug or slugify(source.stem)
    content_dir.mkdir(parents=True, exist_ok=True)

    target = content_dir / f"{effective_slug}.md"
    target.write_text(extract_workshop_markdown(source, effective_slug), encoding="utf-8")
    return target
