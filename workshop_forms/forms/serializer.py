"""Plain-text response records.

A record looks like::

    Workshop Response
    ================

    User Name: Ada Lovelace
    Workshop: Step 0
    Date: 2025-03-01T09:30:00.000Z

    Responses:

    Your Response:
    hello

    ---

    Notes:
    ...

Each field block is ``"\\n<name>:\\n<value>\\n"`` and blocks are joined with
``"\\n---\\n"``. Field order is the document's declaration order.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from ..domain import FieldMarker, SubmissionRecord
from ..settings import RESPONSE_FILE_NAME, RESPONSES_PREFIX
from ..utils import filesystem_timestamp, iso_timestamp, sanitize_identity, utc_now
from .state import FormState

RECORD_HEADER = "Workshop Response\n================\n"
BLOCK_SEPARATOR = "\n---\n"


def build_submission_record(
    identity_name: str,
    document_title: str,
    document_slug: str,
    state: FormState,
    markers: Iterable[FieldMarker],
    moment: datetime | None = None,
) -> SubmissionRecord:
    ordered = sorted(markers, key=lambda marker: marker.ordinal)
    return SubmissionRecord(
        identity_name=identity_name,
        document_title=document_title,
        document_slug=document_slug,
        timestamp=iso_timestamp(moment or utc_now()),
        fields=tuple((marker.name, state.get(marker.name)) for marker in ordered),
    )


def serialize_record(record: SubmissionRecord) -> str:
    blocks = BLOCK_SEPARATOR.join(f"\n{name}:\n{value}\n" for name, value in record.fields)
    return (
        f"{RECORD_HEADER}\n"
        f"User Name: {record.identity_name}\n"
        f"Workshop: {record.document_title}\n"
        f"Date: {record.timestamp}\n"
        f"\n"
        f"Responses:\n"
        f"{blocks}\n"
    )


def parse_record(text: str, field_names: list[str]) -> list[tuple[str, str]]:
    """Split a serialized record back into (name, value) pairs.

    The field names must be given in registry order; a value is only cut short
    if it literally contains the next field's delimiter.
    """
    marker = "\nResponses:\n"
    position = text.find(marker)
    if position < 0:
        raise ValueError("Not a workshop response record")
    body = text[position + len(marker) :]

    pairs: list[tuple[str, str]] = []
    for index, name in enumerate(field_names):
        opening = f"\n{name}:\n"
        if not body.startswith(opening):
            raise ValueError(f"Expected field {name!r} in response record")
        body = body[len(opening) :]

        if index + 1 < len(field_names):
            delimiter = f"\n{BLOCK_SEPARATOR}"
            following = f"{delimiter}\n{field_names[index + 1]}:\n"
            end = body.find(following)
            if end < 0:
                raise ValueError(f"Missing separator after field {name!r}")
            pairs.append((name, body[:end]))
            body = body[end + len(delimiter) :]
        else:
            if not body.endswith("\n\n"):
                raise ValueError(f"Truncated value for field {name!r}")
            pairs.append((name, body[:-2]))

    return pairs


def storage_folder(record: SubmissionRecord) -> str:
    folder_name = "_".join(
        (
            sanitize_identity(record.identity_name),
            record.document_slug,
            filesystem_timestamp(record.timestamp),
        )
    )
    return f"{RESPONSES_PREFIX}/{folder_name}"


def storage_path(record: SubmissionRecord) -> str:
    return f"{storage_folder(record)}/{RESPONSE_FILE_NAME}"


def commit_message(record: SubmissionRecord) -> str:
    return f"Add response from {record.identity_name} for {record.document_title}"
