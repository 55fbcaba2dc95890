from __future__ import annotations

import sys
import uuid
from typing import Optional

from .audit import audit_commit
from .config import BypassGuardConfig
from .constants import ExitCode
from .context import GitHubContext, resolve_target
from .errors import BypassDetectedError, BypassGuardError
from .github import GitHubClient, SourceControlService
from .logging import AuditLogger
from .publish import write_github_outputs, write_step_summary

ACTION_VERSION = "1.0.0"


def run(
    config: BypassGuardConfig,
    ctx: GitHubContext,
    logger: AuditLogger,
    gh: Optional[SourceControlService] = None,
) -> int:
    """Audit one commit and publish the verdict; raises BypassGuardError on failure."""
    target = resolve_target(config, ctx)
    if gh is None:
        gh = GitHubClient(config.github_token.get_secret_value())

    logger.info(
        "bypassguard starting",
        repo=f"{target.owner}/{target.repo}",
        sha=target.sha,
        branch=target.branch,
        fail_on_bypass=config.fail_on_bypass,
    )

    with logger.stage("audit"):
        report = audit_commit(gh, target.owner, target.repo, target.sha, target.branch, logger)

    write_github_outputs(report.verdict)
    write_step_summary(report, ACTION_VERSION)

    if report.verdict.detected and config.fail_on_bypass:
        reasons = ", ".join(report.reasons)
        raise BypassDetectedError(
            f"Merge bypass detected for {target.sha} by {report.verdict.actor} ({reasons})"
        )
    return int(ExitCode.SUCCESS)


def main() -> int:
    """Main entry point."""
    logger = AuditLogger(str(uuid.uuid4()))

    try:
        config = BypassGuardConfig()
    except Exception as exc:
        print(f"::error::Configuration error: {exc}")
        return int(ExitCode.ERROR)

    try:
        return run(config, GitHubContext.from_environment(), logger)
    except BypassGuardError as exc:
        print(f"::error::{exc}")
        return int(exc.exit_code)
    except Exception as exc:
        print(f"::error::Unexpected failure: {exc}")
        return int(ExitCode.ERROR)


if __name__ == "__main__":
    sys.exit(main())
