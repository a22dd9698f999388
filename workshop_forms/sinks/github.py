from __future__ import annotations

import base64
import logging

import requests

from ..domain import SinkReceipt
from ..errors import TransportFailure

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to save response to GitHub"


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return DEFAULT_ERROR_MESSAGE
    if not isinstance(payload, dict):
        return DEFAULT_ERROR_MESSAGE
    nested = payload.get("error")
    nested_message = nested.get("message") if isinstance(nested, dict) else None
    return payload.get("message") or nested_message or DEFAULT_ERROR_MESSAGE


class GitHubContentsSink:
    """Creates one file per response through the GitHub contents API."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        branch: str = "main",
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github.v3+json",
            "Content-Type": "application/json",
        }

    def contents_url(self, destination_path: str) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/contents/{destination_path}"

    def put(self, destination_path: str, content: bytes, commit_message: str) -> SinkReceipt:
        body = {
            "message": commit_message,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": self.branch,
        }

        try:
            response = self._session.put(
                self.contents_url(destination_path),
                headers=self._headers,
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("GitHub request for %s failed: %s", destination_path, exc)
            raise TransportFailure(f"{DEFAULT_ERROR_MESSAGE}: {exc}", status_code=502) from exc

        if not response.ok:
            message = _error_message(response)
            logger.warning("GitHub API error %s for %s: %s", response.status_code, destination_path, message)
            raise TransportFailure(message, status_code=response.status_code)

        try:
            result = response.json()
            receipt = SinkReceipt(
                committed_path=result["content"]["path"],
                commit_id=result["commit"]["sha"],
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise TransportFailure(f"Unexpected GitHub response: {exc}", status_code=502) from exc

        logger.info("Committed %s to %s/%s@%s (%s)", receipt.committed_path, self.owner, self.repo, self.branch, receipt.commit_id)
        return receipt
