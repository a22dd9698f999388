from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from ..domain import SinkReceipt
from ..errors import TransportFailure

logger = logging.getLogger(__name__)


class LocalDirectorySink:
    """Writes responses under a local directory instead of a remote repository."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def put(self, destination_path: str, content: bytes, commit_message: str) -> SinkReceipt:
        target = (self.root / destination_path).resolve()
        if self.root.resolve() not in target.parents:
            raise TransportFailure(f"Refusing to write outside {self.root}: {destination_path}", status_code=400)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as exc:
            raise TransportFailure(f"Failed to write response: {exc}", status_code=500) from exc

        commit_id = hashlib.sha1(content).hexdigest()
        logger.info("%s -> %s", commit_message, target)
        return SinkReceipt(committed_path=destination_path, commit_id=commit_id)
