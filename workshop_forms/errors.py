"""Exceptions raised by the workshop form pipeline."""

from __future__ import annotations


class WorkshopFormsError(Exception):
    """Base exception for workshop form errors."""


class DocumentNotFound(WorkshopFormsError):
    """No workshop file backs the requested slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Workshop not found: {slug}")
        self.slug = slug


class MalformedMarker(WorkshopFormsError):
    """An input marker was opened but never terminated.

    Extraction records the offset instead of raising, and the rest of the
    document renders as static content. `MarkerExtraction.raise_for_malformed`
    raises it for callers that report the problem.
    """

    def __init__(self, offset: int) -> None:
        super().__init__(f"Unterminated input marker at offset {offset}")
        self.offset = offset


class TransportFailure(WorkshopFormsError):
    """The persistence sink rejected the write or could not be reached."""

    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigurationMissing(WorkshopFormsError):
    """Required sink credentials or identifiers are absent."""

    def __init__(self, missing: list[str]) -> None:
        names = ", ".join(missing)
        super().__init__(f"Response sink is not configured. Please set {names} in your environment variables.")
        self.missing = missing


class SessionNotFound(WorkshopFormsError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Form session not found: {session_id}")
        self.session_id = session_id


class SubmissionInProgress(WorkshopFormsError):
    """A submit arrived while the previous one was still in flight."""


class SubmissionClosed(WorkshopFormsError):
    """The form was already submitted successfully."""


class UnknownField(WorkshopFormsError):
    """The workshop declares no field with this name."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"Unknown field: {field_name}")
        self.field_name = field_name
