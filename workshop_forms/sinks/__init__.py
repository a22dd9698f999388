from __future__ import annotations

from typing import Protocol

from ..domain import SinkReceipt
from ..errors import ConfigurationMissing
from ..settings import Settings
from .github import GitHubContentsSink
from .local import LocalDirectorySink


class ResponseSink(Protocol):
    def put(self, destination_path: str, content: bytes, commit_message: str) -> SinkReceipt: ...


def build_sink(settings: Settings) -> ResponseSink:
    if settings.response_sink == "local":
        return LocalDirectorySink(settings.responses_dir)
    if settings.response_sink != "github":
        raise ConfigurationMissing([f"RESPONSE_SINK (unknown value {settings.response_sink!r})"])

    missing = settings.missing_github_settings()
    if missing:
        raise ConfigurationMissing(missing)

    return GitHubContentsSink(
        token=settings.github_token or "",
        owner=settings.github_repo_owner or "",
        repo=settings.github_repo_name or "",
        branch=settings.github_branch,
        api_url=settings.github_api_url,
        timeout=settings.github_timeout,
    )
