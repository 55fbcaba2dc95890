from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from ..constants import UNKNOWN_ACTOR
from ..errors import TransportError
from ..github import SourceControlService
from ..logging import AuditLogger
from ..models import CommitRef, PullRequestLink


def _login(identity: Any) -> str:
    if isinstance(identity, dict):
        return str(identity.get("login") or "").strip()
    return ""


def commit_author(commit: Dict[str, Any]) -> str:
    """Author login, else committer login, else the unknown sentinel."""
    return _login(commit.get("author")) or _login(commit.get("committer")) or UNKNOWN_ACTOR


def resolve_commit(
    gh: SourceControlService,
    owner: str,
    repo: str,
    sha: str,
    logger: AuditLogger,
) -> Tuple[CommitRef, Optional[PullRequestLink]]:
    """Resolve the commit's actor and the pull request that introduced it, if any."""
    commit = gh.get_commit(owner, repo, sha)
    ref = CommitRef(sha=sha, author_login=commit_author(commit or {}))
    logger.info(f"Commit actor: {ref.author_login}")

    logger.info("Fetching PR associated with the commit...")
    pulls = gh.get_pull_requests_for_commit(owner, repo, sha)
    if not pulls:
        logger.warning("No PR associated with this push.")
        return ref, None

    # First entry is authoritative, even when a commit belongs to several PRs.
    try:
        number = int(pulls[0]["number"])
    except (KeyError, TypeError, ValueError) as exc:
        raise TransportError(f"GET /repos/{owner}/{repo}/commits/{sha}/pulls returned an unexpected payload") from exc
    logger.info(f"PR Number: {number}")

    logger.info("Fetching the latest commit SHA from the PR...")
    detail = gh.get_pull_request(owner, repo, number)
    head_sha = ((detail or {}).get("head") or {}).get("sha")
    if not head_sha:
        raise TransportError(f"Pull request #{number} has no head sha")
    logger.info(f"Latest SHA from the PR: {head_sha}")

    return ref, PullRequestLink(number=number, head_sha=str(head_sha))
