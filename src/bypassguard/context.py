from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .config import BypassGuardConfig
from .errors import ConfigError


def _load_event() -> Dict[str, Any]:
    event_path = os.environ.get("GITHUB_EVENT_PATH")
    if not event_path:
        return {}
    try:
        return json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


@dataclass(frozen=True)
class GitHubContext:
    """Immutable GitHub Actions context."""

    # Repository ("owner/name"), may be empty outside Actions
    repo_full_name: str

    event_name: str
    sha: str
    ref: Optional[str]
    actor: str

    @classmethod
    def from_environment(cls) -> "GitHubContext":
        """Load context from GitHub Actions environment."""
        event = _load_event()

        repo_full_name = (
            os.environ.get("GITHUB_REPOSITORY")
            or (event.get("repository") or {}).get("full_name")
            or ""
        )
        sha = event.get("after") or os.environ.get("GITHUB_SHA", "")

        return cls(
            repo_full_name=repo_full_name,
            event_name=os.environ.get("GITHUB_EVENT_NAME", ""),
            sha=sha,
            ref=event.get("ref") or os.environ.get("GITHUB_REF"),
            actor=os.environ.get("GITHUB_ACTOR", ""),
        )

    @property
    def repo_owner(self) -> str:
        return self.repo_full_name.split("/", 1)[0] if "/" in self.repo_full_name else ""

    @property
    def repo_name(self) -> str:
        return self.repo_full_name.split("/", 1)[1] if "/" in self.repo_full_name else ""


@dataclass(frozen=True)
class AuditTarget:
    owner: str
    repo: str
    sha: str
    branch: str


def resolve_target(config: BypassGuardConfig, ctx: GitHubContext) -> AuditTarget:
    """Merge explicit inputs over the workflow context; inputs win."""
    owner = config.owner or ctx.repo_owner
    repo = config.repo or ctx.repo_name
    sha = config.sha or ctx.sha

    if not owner or not repo:
        raise ConfigError("Missing repository: set owner/repo inputs or GITHUB_REPOSITORY")
    if not sha:
        raise ConfigError("Missing commit sha: set the sha input or GITHUB_SHA")

    return AuditTarget(owner=owner, repo=repo, sha=sha, branch=config.branch)
