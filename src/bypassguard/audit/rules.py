from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

from ..models import ProtectionRule, ProtectionRuleSet, RequiredChecks, RuleKind


def parse_rules(payload: Iterable[Dict[str, Any]]) -> ProtectionRuleSet:
    """Normalize the raw branch-rules listing into typed rules."""
    rules: List[ProtectionRule] = []
    for entry in payload or []:
        if not isinstance(entry, dict):
            continue
        parameters = entry.get("parameters")
        rules.append(
            ProtectionRule(
                kind=RuleKind.from_wire(entry.get("type")),
                parameters=parameters if isinstance(parameters, dict) else {},
            )
        )
    return tuple(rules)


def _required_check_names(rules: ProtectionRuleSet) -> RequiredChecks:
    names: Dict[str, None] = {}
    for rule in rules:
        if rule.kind is not RuleKind.REQUIRED_STATUS_CHECKS:
            continue
        for check in rule.parameters.get("required_status_checks") or []:
            context = check.get("context") if isinstance(check, dict) else None
            if context:
                names.setdefault(str(context), None)
    return RequiredChecks(names=tuple(names))


def _required_approving_reviews(rules: ProtectionRuleSet) -> int:
    for rule in rules:
        if rule.kind is RuleKind.PULL_REQUEST:
            try:
                return int(rule.parameters.get("required_approving_review_count") or 0)
            except (TypeError, ValueError):
                return 0
    return 0


def extract_requirements(rules: ProtectionRuleSet) -> Tuple[RequiredChecks, int]:
    """
    Reduce a rule set to (required check names, required approving reviews).

    Missing rules yield an empty check set and zero reviews, which downstream
    stages read as "no requirement".
    """
    return _required_check_names(rules), _required_approving_reviews(rules)
