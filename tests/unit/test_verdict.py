from __future__ import annotations

from typing import Any, Dict, List

import pytest

from bypassguard.audit.verdict import assess_reviews, compose_verdict, count_approvals, parse_reviews
from bypassguard.errors import TransportError
from bypassguard.logging import AuditLogger
from bypassguard.models import (
    CheckOutcome,
    CheckReconciliation,
    PullRequestLink,
    ReviewAssessment,
    ReviewRecord,
)

PR = PullRequestLink(number=1, head_sha="head")
PASSING = CheckReconciliation(skipped=False, outcomes=(CheckOutcome("build", "success"),))
FAILING = CheckReconciliation(skipped=False, outcomes=(CheckOutcome("build", "failure"),))
SKIPPED = CheckReconciliation(skipped=True)


class ReviewsGitHub:
    def __init__(self, reviews: List[Dict[str, Any]]) -> None:
        self._reviews = reviews
        self.calls = 0

    def get_pull_request_reviews(self, owner: str, repo: str, number: int) -> List[Dict[str, Any]]:
        self.calls += 1
        return self._reviews


def test_count_approvals_counts_every_approved_record() -> None:
    reviews = [ReviewRecord("APPROVED"), ReviewRecord("COMMENTED"), ReviewRecord("APPROVED"), ReviewRecord("approved")]

    assert count_approvals(reviews) == 2


def test_parse_reviews_tolerates_missing_state() -> None:
    assert parse_reviews([{"state": "APPROVED"}, {}]) == [ReviewRecord("APPROVED"), ReviewRecord("")]


def test_reviews_not_fetched_when_none_required() -> None:
    gh = ReviewsGitHub([{"state": "APPROVED"}])

    assessment = assess_reviews(gh, "octo", "repo", PR, 0, AuditLogger("run"))

    assert gh.calls == 0
    assert assessment.evaluated is False
    assert assessment.sufficient is True


def test_reviews_not_fetched_without_pull_request() -> None:
    gh = ReviewsGitHub([])

    assessment = assess_reviews(gh, "octo", "repo", None, 2, AuditLogger("run"))

    assert gh.calls == 0
    assert assessment.evaluated is False


def test_insufficient_reviews_warn(capsys) -> None:
    gh = ReviewsGitHub([{"state": "APPROVED"}, {"state": "CHANGES_REQUESTED"}])

    assessment = assess_reviews(gh, "octo", "repo", PR, 2, AuditLogger("run"))

    assert assessment == ReviewAssessment(required=2, approved=1)
    assert assessment.sufficient is False
    assert "::warning:: -> Insufficient approving reviews (1/2)." in capsys.readouterr().err


def test_no_gates_violated() -> None:
    verdict, reasons = compose_verdict("alice", PR, SKIPPED, ReviewAssessment(required=0))

    assert verdict.detected is False
    assert verdict.from_pull_request is True
    assert reasons == ()


def test_missing_pull_request_always_detected() -> None:
    verdict, reasons = compose_verdict("alice", None, SKIPPED, ReviewAssessment(required=0))

    assert verdict.detected is True
    assert verdict.from_pull_request is False
    assert reasons == ("no_pull_request",)


def test_enough_approvals_pass() -> None:
    verdict, _ = compose_verdict("alice", PR, PASSING, ReviewAssessment(required=2, approved=2))

    assert verdict.detected is False


def test_one_approval_short_is_detected() -> None:
    verdict, reasons = compose_verdict("alice", PR, PASSING, ReviewAssessment(required=2, approved=1))

    assert verdict.detected is True
    assert reasons == ("insufficient_approvals",)


def test_every_violated_gate_is_reported() -> None:
    verdict, reasons = compose_verdict("alice", PR, FAILING, ReviewAssessment(required=3, approved=2))

    assert verdict.detected is True
    assert reasons == ("required_checks_failed", "insufficient_approvals")


def test_non_object_review_entry_is_transport_error() -> None:
    with pytest.raises(TransportError, match="unexpected payload"):
        parse_reviews([{"state": "APPROVED"}, None])  # type: ignore[list-item]
