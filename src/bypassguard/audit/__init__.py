"""Bypass determination: rule extraction, commit resolution, check reconciliation, verdict."""

from .checks import latest_check_runs, reconcile_checks
from .commit import commit_author, resolve_commit
from .engine import audit_commit
from .rules import extract_requirements, parse_rules
from .verdict import assess_reviews, compose_verdict, count_approvals

__all__ = [
    "assess_reviews",
    "audit_commit",
    "commit_author",
    "compose_verdict",
    "count_approvals",
    "extract_requirements",
    "latest_check_runs",
    "parse_rules",
    "reconcile_checks",
    "resolve_commit",
]
