from __future__ import annotations

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_BRANCH


class BypassGuardConfig(BaseSettings):
    """Configuration loaded from GitHub Actions inputs."""

    model_config = SettingsConfigDict(
        env_prefix="INPUT_",
        frozen=True,
        extra="ignore",
    )

    github_token: SecretStr = Field(
        default="",
        validate_default=True,
        description="GitHub token used for read-only API calls",
    )

    # Target; empty values fall back to the workflow context
    owner: str = Field(default="", description="Repository owner (defaults to GITHUB_REPOSITORY)")
    repo: str = Field(default="", description="Repository name (defaults to GITHUB_REPOSITORY)")
    sha: str = Field(default="", description="Commit to audit (defaults to the triggering commit)")
    branch: str = Field(default=DEFAULT_BRANCH, description="Protected branch whose rules are audited")

    fail_on_bypass: bool = Field(
        default=False,
        description="Fail the step when a bypass is detected instead of only warning",
    )

    @field_validator("owner", "repo", "sha", mode="before")
    @classmethod
    def _strip(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("branch", mode="before")
    @classmethod
    def _normalize_branch(cls, value: str) -> str:
        if isinstance(value, str):
            trimmed = value.strip()
            if trimmed.startswith("refs/heads/"):
                trimmed = trimmed[len("refs/heads/"):]
            if not trimmed:
                raise ValueError("branch must not be blank")
            return trimmed
        return value

    @field_validator("github_token")
    @classmethod
    def _require_token(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("github_token is required")
        return value
