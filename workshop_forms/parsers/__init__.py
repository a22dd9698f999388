from __future__ import annotations

from .pdf_parser import extract_workshop_markdown, workshop_markdown_from_text, write_workshop_from_pdf

__all__ = ["extract_workshop_markdown", "workshop_markdown_from_text", "write_workshop_from_pdf"]
