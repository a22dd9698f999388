from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import logging
import threading
from typing import Callable, Iterable

from ..domain import FieldMarker, SinkReceipt, SubmissionRecord
from ..errors import SubmissionClosed, SubmissionInProgress, TransportFailure
from ..forms.serializer import build_submission_record, commit_message, serialize_record, storage_folder, storage_path
from ..forms.state import FormState
from ..settings import RESPONSE_FILE_NAME
from ..sinks import ResponseSink
from ..utils import utc_now

logger = logging.getLogger(__name__)


class SubmissionState(str, Enum):
    IDLE = "IDLE"
    SUBMITTING = "SUBMITTING"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class SubmissionOutcome:
    record: SubmissionRecord
    receipt: SinkReceipt
    folder_path: str
    file_name: str = RESPONSE_FILE_NAME

    def to_payload(self) -> dict[str, object]:
        return {
            "success": True,
            "file_path": self.receipt.committed_path,
            "folder_path": self.folder_path,
            "file_name": self.file_name,
            "commit_sha": self.receipt.commit_id,
        }


class SubmissionCoordinator:
    """Runs serialize -> transmit -> acknowledge for one form.

    Only one attempt may be in flight at a time. A failed attempt leaves the
    form state untouched and can be retried from FAILED exactly like IDLE; a
    successful one clears it and closes the coordinator for good.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self.state = SubmissionState.IDLE
        self.last_error: TransportFailure | None = None

    @property
    def submitting(self) -> bool:
        return self.state is SubmissionState.SUBMITTING

    @property
    def closed(self) -> bool:
        return self.state is SubmissionState.ACKNOWLEDGED

    def _begin(self) -> None:
        with self._lock:
            if self.state is SubmissionState.SUBMITTING:
                raise SubmissionInProgress("A submission for this form is already in progress")
            if self.closed:
                raise SubmissionClosed("This form has already been submitted")
            self.state = SubmissionState.SUBMITTING

    def submit(
        self,
        sink: ResponseSink,
        identity_name: str,
        document_title: str,
        document_slug: str,
        form_state: FormState,
        markers: Iterable[FieldMarker],
    ) -> SubmissionOutcome:
        self._begin()

        try:
            record = build_submission_record(
                identity_name,
                document_title,
                document_slug,
                form_state,
                markers,
                moment=self._clock(),
            )
            path = storage_path(record)
            receipt = sink.put(path, serialize_record(record).encode("utf-8"), commit_message(record))
        except TransportFailure as exc:
            with self._lock:
                self.state = SubmissionState.FAILED
                self.last_error = exc
            logger.warning("Submission for %s by %s failed (%s): %s", document_slug, identity_name, exc.status_code, exc.message)
            raise
        except Exception:
            with self._lock:
                self.state = SubmissionState.IDLE
            raise

        with self._lock:
            self.state = SubmissionState.ACKNOWLEDGED
            self.last_error = None
        form_state.clear()
        logger.info("Saved response for %s by %s at %s", document_slug, identity_name, receipt.committed_path)
        return SubmissionOutcome(record=record, receipt=receipt, folder_path=storage_folder(record))


def markers_for_responses(registry: Iterable[FieldMarker], responses: dict[str, str]) -> list[FieldMarker]:
    """Registry fields first, then any answered field the registry does not know."""
    markers = sorted(registry, key=lambda marker: marker.ordinal)
    known = {marker.name for marker in markers}
    next_ordinal = max((marker.ordinal for marker in markers), default=-1) + 1
    for name in responses:
        if name in known:
            continue
        markers.append(FieldMarker(name=name, declared_type="text", ordinal=next_ordinal))
        known.add(name)
        next_ordinal += 1
    return markers


def save_responses(
    sink: ResponseSink,
    identity_name: str,
    document_title: str,
    document_slug: str,
    responses: dict[str, str],
    registry: Iterable[FieldMarker] = (),
) -> SubmissionOutcome:
    markers = markers_for_responses(registry, responses)
    form_state = FormState(marker.name for marker in markers)
    for name, value in responses.items():
        form_state.set(name, value)
    return SubmissionCoordinator().submit(sink, identity_name, document_title, document_slug, form_state, markers)
