from __future__ import annotations

from ..github import SourceControlService
from ..logging import AuditLogger
from ..models import BypassReport, CheckReconciliation
from .checks import reconcile_checks
from .commit import resolve_commit
from .rules import extract_requirements, parse_rules
from .verdict import assess_reviews, compose_verdict


def audit_commit(
    gh: SourceControlService,
    owner: str,
    repo: str,
    sha: str,
    branch: str,
    logger: AuditLogger,
) -> BypassReport:
    """
    Decide whether the merge of `sha` into `branch` bypassed protection.

    Lookups run one after another since each depends on the previous result
    (rules, commit, PR, PR head, check runs, reviews). Any TransportError
    propagates and no partial report is produced.
    """
    logger.info("Fetching branch rules...", branch=branch)
    rules = parse_rules(gh.get_branch_rules(owner, repo, branch))
    required_checks, required_reviews = extract_requirements(rules)
    if required_checks:
        listing = "".join(f"\n -> {name}" for name in required_checks)
        logger.info(f"Required checks for the branch:{listing}")
    else:
        logger.info("No required checks configured for the branch.")
    if required_reviews:
        logger.info(f"Required approving reviews for the branch: {required_reviews}")

    commit, pull_request = resolve_commit(gh, owner, repo, sha, logger)

    if pull_request is None:
        checks = CheckReconciliation(skipped=True)
    else:
        checks = reconcile_checks(gh, owner, repo, required_checks, pull_request.head_sha, logger)

    reviews = assess_reviews(gh, owner, repo, pull_request, required_reviews, logger)

    verdict, reasons = compose_verdict(commit.author_login, pull_request, checks, reviews)
    if verdict.detected:
        logger.warning("Merge bypass detected.", reasons=list(reasons), actor=verdict.actor)
    else:
        logger.info("No merge bypass detected.")

    return BypassReport(
        owner=owner,
        repo=repo,
        branch=branch,
        sha=sha,
        verdict=verdict,
        required_checks=required_checks,
        pull_request=pull_request,
        checks=checks,
        reviews=reviews,
        reasons=reasons,
    )
