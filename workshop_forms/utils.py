from __future__ import annotations

from datetime import datetime, timezone
import hashlib
import re

NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")
SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Millisecond ISO-8601 in UTC with a `Z` suffix, e.g. 2025-03-01T09:30:00.000Z."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def filesystem_timestamp(timestamp: str) -> str:
    return timestamp.replace(":", "-").replace(".", "-")


def sanitize_identity(name: str) -> str:
    return NON_ALPHANUMERIC.sub("_", name)


def content_hash(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def slugify(name: str) -> str:
    return SLUG_SEPARATORS.sub("-", name.lower()).strip("-")


def title_from_slug(slug: str) -> str:
    return " ".join(part[:1].upper() + part[1:] for part in slug.split("-") if part)
