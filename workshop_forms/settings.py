from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent

CONTENT_DIR = PROJECT_ROOT / "content" / "workshops"
PDFS_DIR = PROJECT_ROOT / "pdfs"
ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"
RESPONSES_DIR = ARTIFACTS_DIR / "responses"

RESPONSES_PREFIX = "responses"
RESPONSE_FILE_NAME = "response.txt"


class Settings(BaseSettings):
    """Runtime configuration read from the environment and `.env`."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # GitHub contents API
    github_token: str | None = None
    github_repo_owner: str | None = None
    github_repo_name: str | None = None
    github_branch: str = "main"
    github_api_url: str = "https://api.github.com"
    github_timeout: float = 30.0

    # "github" commits responses to a repository, "local" writes them under responses_dir
    response_sink: str = "github"

    content_dir: Path = CONTENT_DIR
    responses_dir: Path = RESPONSES_DIR

    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    log_level: str = "INFO"

    def missing_github_settings(self) -> list[str]:
        required = {
            "GITHUB_TOKEN": self.github_token,
            "GITHUB_REPO_OWNER": self.github_repo_owner,
            "GITHUB_REPO_NAME": self.github_repo_name,
        }
        return [name for name, value in required.items() if not value]


@lru_cache
def get_settings() -> Settings:
    return Settings()


def ensure_runtime_dirs() -> None:
    for directory in (ARTIFACTS_DIR, RESPONSES_DIR):
        directory.mkdir(parents=True, exist_ok=True)
