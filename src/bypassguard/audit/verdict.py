from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..constants import REVIEW_APPROVED
from ..errors import TransportError
from ..github import SourceControlService
from ..logging import AuditLogger
from ..models import (
    BypassReason,
    BypassVerdict,
    CheckReconciliation,
    PullRequestLink,
    ReviewAssessment,
    ReviewRecord,
)


def parse_reviews(payload: Iterable[Dict[str, Any]]) -> List[ReviewRecord]:
    reviews: List[ReviewRecord] = []
    for entry in payload or []:
        if not isinstance(entry, dict):
            raise TransportError("GET reviews returned an unexpected payload")
        reviews.append(ReviewRecord(state=str(entry.get("state") or "")))
    return reviews


def count_approvals(reviews: Iterable[ReviewRecord]) -> int:
    # Every APPROVED record counts; the same reviewer approving twice counts twice.
    return sum(1 for review in reviews if review.state == REVIEW_APPROVED)


def assess_reviews(
    gh: SourceControlService,
    owner: str,
    repo: str,
    pull_request: Optional[PullRequestLink],
    required: int,
    logger: AuditLogger,
) -> ReviewAssessment:
    """Count approving reviews, only when the branch requires any and a PR exists."""
    if required <= 0:
        logger.info("No required approving reviews configured for the branch.")
        return ReviewAssessment(required=0)
    if pull_request is None:
        return ReviewAssessment(required=required)

    logger.info("Fetching PR reviews...")
    approved = count_approvals(parse_reviews(gh.get_pull_request_reviews(owner, repo, pull_request.number)))
    assessment = ReviewAssessment(required=required, approved=approved)
    if assessment.sufficient:
        logger.info(f" -> Required approving reviews satisfied ({approved}/{required}).")
    else:
        logger.warning(f" -> Insufficient approving reviews ({approved}/{required}).")
    return assessment


def compose_verdict(
    actor: str,
    pull_request: Optional[PullRequestLink],
    checks: CheckReconciliation,
    reviews: ReviewAssessment,
) -> Tuple[BypassVerdict, Tuple[BypassReason, ...]]:
    """
    OR the three gates into one verdict.

    Each gate is checked on its own so callers see every violated condition:
    a missing pull request, any failed required check, and too few approvals.
    """
    reasons: List[BypassReason] = []
    if pull_request is None:
        reasons.append("no_pull_request")
    if checks.any_failed:
        reasons.append("required_checks_failed")
    if reviews.evaluated and not reviews.sufficient:
        reasons.append("insufficient_approvals")

    verdict = BypassVerdict(
        detected=bool(reasons),
        actor=actor,
        from_pull_request=pull_request is not None,
    )
    return verdict, tuple(reasons)
