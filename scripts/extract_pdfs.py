from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

PROJECT_DIR = Path(__file__).resolve().parents[1]
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from pypdf.errors import PdfReadError  # noqa: E402

from workshop_forms.logging_setup import configure_logging  # noqa: E402
from workshop_forms.parsers import write_workshop_from_pdf  # noqa: E402
from workshop_forms.settings import CONTENT_DIR, PDFS_DIR  # noqa: E402

logger = logging.getLogger("workshop_forms.extract_pdfs")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Turn workshop PDFs into Markdown workshop files.")
    parser.add_argument("--pdfs", type=Path, default=PDFS_DIR, help="directory holding the PDFs")
    parser.add_argument("--out", type=Path, default=CONTENT_DIR, help="workshop content directory")
    args = parser.parse_args(argv)

    configure_logging()

    if not args.pdfs.is_dir():
        logger.error("PDF directory not found: %s", args.pdfs)
        return 1

    failures = 0
    for pdf_path in sorted(args.pdfs.glob("*.pdf")):
        try:
            target = write_workshop_from_pdf(pdf_path, args.out)
        except (OSError, PdfReadError) as exc:
            logger.error("Could not extract %s: %s", pdf_path.name, exc)
            failures += 1
            continue
        logger.info("Extracted %s -> %s", pdf_path.name, target.name)

    logger.info("Review the generated Markdown and place [INPUT:textarea:Field Name] markers where needed.")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
