from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..errors import TransportError
from ..github import SourceControlService
from ..logging import AuditLogger
from ..models import CheckOutcome, CheckReconciliation, CheckRun, RequiredChecks


def _coerce_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def parse_check_runs(payload: Iterable[Dict[str, Any]]) -> List[CheckRun]:
    runs: List[CheckRun] = []
    for entry in payload or []:
        if not isinstance(entry, dict):
            raise TransportError("GET check-runs returned an unexpected payload")
        name = entry.get("name")
        if not name:
            continue
        runs.append(
            CheckRun(
                name=str(name),
                conclusion=entry.get("conclusion"),
                suite_id=_coerce_int((entry.get("check_suite") or {}).get("id")),
            )
        )
    return runs


def latest_check_runs(runs: Iterable[CheckRun]) -> Dict[str, CheckRun]:
    """
    Keep one run per check name: the one from the highest check-suite id.

    Re-runs land in new suites, so the highest id is the latest attempt. Only a
    strictly greater id replaces the retained run; ties keep the first seen.
    """
    latest: Dict[str, CheckRun] = {}
    for run in runs:
        current = latest.get(run.name)
        if current is None or run.suite_id > current.suite_id:
            latest[run.name] = run
    return latest


def evaluate_required_checks(
    required: RequiredChecks,
    latest: Dict[str, CheckRun],
) -> CheckReconciliation:
    outcomes = []
    for name in required:
        run = latest.get(name)
        outcomes.append(CheckOutcome(name=name, state=run.conclusion if run else None))
    return CheckReconciliation(skipped=False, outcomes=tuple(outcomes))


def reconcile_checks(
    gh: SourceControlService,
    owner: str,
    repo: str,
    required: RequiredChecks,
    head_sha: str,
    logger: AuditLogger,
) -> CheckReconciliation:
    """Compare the latest check runs on the PR head against the required set."""
    if not required:
        return CheckReconciliation(skipped=True)

    logger.info("Fetching PR checks...")
    runs = parse_check_runs(gh.get_check_runs(owner, repo, head_sha))
    result = evaluate_required_checks(required, latest_check_runs(runs))

    for outcome in result.outcomes:
        state = outcome.state if outcome.state is not None else "undefined"
        if outcome.passed:
            logger.info(f" -> Required {outcome.name} check passed (state: {state}).")
        else:
            logger.warning(f" -> Required {outcome.name} check did not pass (state: {state}).")
    return result
