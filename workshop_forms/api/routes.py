from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Callable

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from ..content.workshops import list_workshops, load_workshop
from ..domain import FieldSlot, RenderSegment
from ..errors import (
    ConfigurationMissing,
    DocumentNotFound,
    SessionNotFound,
    SubmissionClosed,
    SubmissionInProgress,
    TransportFailure,
    UnknownField,
)
from ..services.session_service import FormSession, sessions
from ..services.submission_service import SubmissionOutcome, save_responses
from ..settings import get_settings
from ..sinks import ResponseSink, build_sink
from .models import FieldUpdateRequest, SaveResponseRequest, SessionCreateRequest


router = APIRouter()


def get_content_dir() -> Path:
    return get_settings().content_dir


@lru_cache
def _configured_sink() -> ResponseSink:
    return build_sink(get_settings())


def get_sink() -> ResponseSink:
    try:
        return _configured_sink()
    except ConfigurationMissing as exc:
        raise HTTPException(
            status_code=500,
            detail={"error": "configuration_missing", "message": str(exc), "missing": exc.missing},
        ) from exc


def _segment_payload(segment: RenderSegment) -> dict[str, Any]:
    if isinstance(segment, FieldSlot):
        return {"kind": segment.kind, "field_name": segment.field_name, "type": segment.declared_type}
    return {"kind": segment.kind, "html": segment.html}


def _get_session(session_id: str) -> FormSession:
    try:
        return sessions.get(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="Form session not found") from exc


def _submit(action: Callable[[], SubmissionOutcome]) -> SubmissionOutcome:
    try:
        return action()
    except (SubmissionInProgress, SubmissionClosed) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except TransportFailure as exc:
        raise HTTPException(
            status_code=exc.status_code,
            detail={"error": "transport_failure", "message": exc.message},
        ) from exc


@router.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/workshops")
def get_workshops(content_dir: Path = Depends(get_content_dir)) -> dict[str, list[dict[str, Any]]]:
    return {
        "workshops": [
            {"slug": workshop.slug, "title": workshop.title, "tags": list(workshop.tags)}
            for workshop in list_workshops(content_dir)
        ]
    }


@router.get("/workshops/{slug}")
def get_workshop(slug: str, content_dir: Path = Depends(get_content_dir)) -> dict[str, Any]:
    try:
        form = load_workshop(slug, content_dir)
    except DocumentNotFound as exc:
        raise HTTPException(status_code=404, detail="Workshop not found") from exc

    workshop = form.workshop
    return {
        "workshop": {"slug": workshop.slug, "title": workshop.title, "tags": list(workshop.tags)},
        "fields": [
            {"name": marker.name, "type": marker.declared_type, "ordinal": marker.ordinal}
            for marker in form.markers
        ],
        "segments": [_segment_payload(segment) for segment in form.segments],
        "malformed_marker_offset": form.malformed_at,
    }


@router.post("/sessions")
def open_session(request: SessionCreateRequest, content_dir: Path = Depends(get_content_dir)) -> dict[str, Any]:
    if not request.user_name.strip():
        raise HTTPException(status_code=400, detail="user_name is required")
    try:
        form = load_workshop(request.workshop_slug, content_dir)
    except DocumentNotFound as exc:
        raise HTTPException(status_code=404, detail="Workshop not found") from exc

    session = sessions.open(form, request.user_name)
    return {"session": session.to_payload()}


@router.get("/sessions/{session_id}")
def get_session(session_id: str) -> dict[str, Any]:
    return {"session": _get_session(session_id).to_payload()}


@router.put("/sessions/{session_id}/fields/{field_name:path}")
def update_field(session_id: str, field_name: str, request: FieldUpdateRequest) -> dict[str, Any]:
    session = _get_session(session_id)
    try:
        session.set_value(field_name, request.value)
    except UnknownField as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SubmissionClosed as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return {"field": {"name": field_name, "value": session.state.get(field_name)}}


@router.get("/sessions/{session_id}/form", response_class=HTMLResponse)
def render_session_form(session_id: str) -> HTMLResponse:
    return HTMLResponse(_get_session(session_id).render())


@router.post("/sessions/{session_id}/submit")
def submit_session(session_id: str, sink: ResponseSink = Depends(get_sink)) -> dict[str, Any]:
    session = _get_session(session_id)
    outcome = _submit(lambda: session.submit(sink))
    sessions.discard(session.id, missing_ok=True)
    return outcome.to_payload()


@router.delete("/sessions/{session_id}")
def close_session(session_id: str) -> dict[str, str]:
    try:
        sessions.discard(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="Form session not found") from exc
    return {"status": "closed"}


@router.post("/responses")
def save_response(
    request: SaveResponseRequest,
    sink: ResponseSink = Depends(get_sink),
    content_dir: Path = Depends(get_content_dir),
) -> dict[str, Any]:
    if not request.user_name or not request.workshop_title or not request.workshop_slug:
        raise HTTPException(status_code=400, detail="Missing required fields")

    try:
        registry = load_workshop(request.workshop_slug, content_dir).markers
    except DocumentNotFound:
        registry = ()

    outcome = _submit(
        lambda: save_responses(
            sink,
            request.user_name,
            request.workshop_title,
            request.workshop_slug,
            request.responses,
            registry,
        )
    )
    return outcome.to_payload()
