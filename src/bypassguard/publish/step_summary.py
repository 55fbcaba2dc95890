from __future__ import annotations

import os
from typing import List

from ..models import BypassReport

_REASON_TEXT = {
    "no_pull_request": "No pull request is associated with this commit",
    "required_checks_failed": "One or more required checks did not pass",
    "insufficient_approvals": "Not enough approving reviews",
}


def _checks_section(report: BypassReport) -> List[str]:
    if not report.required_checks:
        return ["**Required checks:** none configured", ""]
    if report.checks.skipped:
        return ["**Required checks:** not evaluated (no pull request)", ""]

    md = [
        "| Required check | Latest conclusion | Passed? |",
        "|----------------|-------------------|:-------:|",
    ]
    for outcome in report.checks.outcomes:
        state = outcome.state if outcome.state is not None else "_not found_"
        md.append(f"| `{outcome.name}` | {state} | {'✅' if outcome.passed else '❌'} |")
    md.append("")
    return md


def _reviews_line(report: BypassReport) -> str:
    reviews = report.reviews
    if reviews.required <= 0:
        return "**Approving reviews:** none required"
    if not reviews.evaluated:
        return f"**Approving reviews:** {reviews.required} required, not evaluated (no pull request)"
    icon = "✅" if reviews.sufficient else "❌"
    return f"**Approving reviews:** {icon} {reviews.approved}/{reviews.required}"


def write_step_summary(report: BypassReport, version: str) -> None:
    """
    Write GitHub Actions Step Summary.

    Informational only; the machine-readable result is the step outputs.
    """
    summary_path = os.environ.get("GITHUB_STEP_SUMMARY")
    if not summary_path:
        return

    verdict = report.verdict
    status = "⚠️ BYPASS DETECTED" if verdict.detected else "✅ PROTECTED"
    pr_text = f"#{report.pull_request.number}" if report.pull_request else "none"

    md = [
        f"## 🛡️ Merge Bypass Audit: {status}",
        "",
        f"**Repository:** `{report.repo_full_name}` · **Branch:** `{report.branch}`",
        f"**Commit:** `{report.sha[:12]}` · **Actor:** `{verdict.actor}` · **Pull request:** {pr_text}",
        "",
    ]
    md.extend(_checks_section(report))
    md.append(_reviews_line(report))
    md.append("")

    if report.reasons:
        md.append("### Violations")
        md.append("")
        for reason in report.reasons:
            md.append(f"- {_REASON_TEXT.get(reason, reason)}")
        md.append("")

    md.append(f"<sub>bypassguard v{version}</sub>")
    md.append("")

    with open(summary_path, "a", encoding="utf-8") as summary_file:
        summary_file.write("\n".join(md))
