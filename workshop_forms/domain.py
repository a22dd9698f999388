from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Workshop:
    slug: str
    title: str
    raw_text: str
    html: str
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class FieldMarker:
    name: str
    declared_type: str
    ordinal: int


@dataclass(frozen=True)
class StaticMarkup:
    html: str
    start: int
    end: int

    kind = "static"


@dataclass(frozen=True)
class FieldSlot:
    field_name: str
    declared_type: str
    start: int
    end: int

    kind = "field"


RenderSegment = StaticMarkup | FieldSlot


@dataclass(frozen=True)
class SubmissionRecord:
    identity_name: str
    document_title: str
    document_slug: str
    timestamp: str
    fields: tuple[tuple[str, str], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SinkReceipt:
    committed_path: str
    commit_id: str
