from __future__ import annotations

from dataclasses import dataclass, field
import threading
from typing import Any
import uuid

from ..content.workshops import WorkshopForm
from ..errors import SessionNotFound, SubmissionClosed, UnknownField
from ..forms.render import render_form
from ..forms.state import FormState
from ..sinks import ResponseSink
from ..utils import iso_timestamp, utc_now
from .submission_service import SubmissionCoordinator, SubmissionOutcome


@dataclass
class FormSession:
    id: str
    form: WorkshopForm
    identity_name: str
    created_at: str
    state: FormState
    coordinator: SubmissionCoordinator = field(default_factory=SubmissionCoordinator)

    @property
    def status(self) -> str:
        return self.coordinator.state.value

    def set_value(self, field_name: str, value: str) -> None:
        if field_name not in self.state:
            raise UnknownField(field_name)
        if self.coordinator.closed:
            raise SubmissionClosed("This form has already been submitted")
        self.state.set(field_name, value)

    def render(self) -> str:
        return render_form(list(self.form.segments), self.state, submitting=self.coordinator.submitting)

    def submit(self, sink: ResponseSink) -> SubmissionOutcome:
        workshop = self.form.workshop
        return self.coordinator.submit(
            sink,
            identity_name=self.identity_name,
            document_title=workshop.title,
            document_slug=workshop.slug,
            form_state=self.state,
            markers=self.form.markers,
        )

    def to_payload(self) -> dict[str, Any]:
        last_error = self.coordinator.last_error
        return {
            "id": self.id,
            "workshop_slug": self.form.workshop.slug,
            "workshop_title": self.form.workshop.title,
            "user_name": self.identity_name,
            "status": self.status,
            "created_at": self.created_at,
            "fields": [
                {"name": marker.name, "type": marker.declared_type, "ordinal": marker.ordinal}
                for marker in self.form.markers
            ],
            "values": self.state.values(),
            "last_error": (
                {"message": last_error.message, "status_code": last_error.status_code} if last_error else None
            ),
        }


class SessionRegistry:
    """Open forms, one per page view, kept in memory only."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: dict[str, FormSession] = {}

    def open(self, form: WorkshopForm, identity_name: str) -> FormSession:
        session = FormSession(
            id=uuid.uuid4().hex,
            form=form,
            identity_name=identity_name,
            created_at=iso_timestamp(utc_now()),
            state=FormState(form.field_names),
        )
        with self._lock:
            self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> FormSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def discard(self, session_id: str, missing_ok: bool = False) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None and not missing_ok:
                raise SessionNotFound(session_id)


sessions = SessionRegistry()
