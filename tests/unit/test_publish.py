from __future__ import annotations

from bypassguard.models import (
    BypassReport,
    BypassVerdict,
    CheckOutcome,
    CheckReconciliation,
    PullRequestLink,
    RequiredChecks,
    ReviewAssessment,
)
from bypassguard.publish import write_github_outputs, write_step_summary


def _report(detected: bool = True) -> BypassReport:
    return BypassReport(
        owner="octo",
        repo="repo",
        branch="main",
        sha="abcdef1234567890",
        verdict=BypassVerdict(detected=detected, actor="alice", from_pull_request=True),
        required_checks=RequiredChecks(("build", "lint")),
        pull_request=PullRequestLink(number=12, head_sha="head"),
        checks=CheckReconciliation(
            skipped=False,
            outcomes=(CheckOutcome("build", "success"), CheckOutcome("lint", None)),
        ),
        reviews=ReviewAssessment(required=2, approved=1),
        reasons=("required_checks_failed", "insufficient_approvals") if detected else (),
    )


def test_outputs_written(tmp_path, monkeypatch) -> None:
    output_file = tmp_path / "output.txt"
    monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))

    write_github_outputs(BypassVerdict(detected=True, actor="alice", from_pull_request=False))

    assert output_file.read_text(encoding="utf-8").splitlines() == [
        "merge_bypass_detected=true",
        "commit_actor=alice",
        "commit_from_pr=false",
    ]


def test_outputs_noop_without_env(tmp_path) -> None:
    write_github_outputs(BypassVerdict(detected=False, actor="alice", from_pull_request=True))
    assert list(tmp_path.iterdir()) == []


def test_step_summary_writes_file(tmp_path, monkeypatch) -> None:
    summary_file = tmp_path / "summary.md"
    monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(summary_file))

    write_step_summary(_report(), "1.0.0")

    content = summary_file.read_text(encoding="utf-8")
    assert "BYPASS DETECTED" in content
    assert "`build` | success | ✅" in content
    assert "`lint` | _not found_ | ❌" in content
    assert "1/2" in content
    assert "Not enough approving reviews" in content
    assert "#12" in content


def test_step_summary_protected(tmp_path, monkeypatch) -> None:
    summary_file = tmp_path / "summary.md"
    monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(summary_file))

    write_step_summary(_report(detected=False), "1.0.0")

    content = summary_file.read_text(encoding="utf-8")
    assert "PROTECTED" in content
    assert "Violations" not in content
