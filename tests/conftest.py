from __future__ import annotations

from dataclasses import dataclass, field
import hashlib
from typing import Iterator

from fastapi.testclient import TestClient
import pytest

from app import app
from workshop_forms.api.routes import get_sink
from workshop_forms.domain import SinkReceipt
from workshop_forms.errors import TransportFailure


@dataclass
class SinkCall:
    destination_path: str
    content: bytes
    commit_message: str

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


@dataclass
class RecordingSink:
    calls: list[SinkCall] = field(default_factory=list)

    def put(self, destination_path: str, content: bytes, commit_message: str) -> SinkReceipt:
        self.calls.append(SinkCall(destination_path, content, commit_message))
        return SinkReceipt(committed_path=destination_path, commit_id=hashlib.sha1(content).hexdigest())


@dataclass
class FailingSink:
    message: str = "Bad credentials"
    status_code: int = 401
    calls: int = 0

    def put(self, destination_path: str, content: bytes, commit_message: str) -> SinkReceipt:
        self.calls += 1
        raise TransportFailure(self.message, status_code=self.status_code)


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def client(recording_sink: RecordingSink) -> Iterator[TestClient]:
    app.dependency_overrides[get_sink] = lambda: recording_sink
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()
