from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Literal, Optional, Tuple

from .constants import CHECK_SUCCESS

BypassReason = Literal["no_pull_request", "required_checks_failed", "insufficient_approvals"]


class RuleKind(str, Enum):
    REQUIRED_STATUS_CHECKS = "required_status_checks"
    PULL_REQUEST = "pull_request"
    OTHER = "other"

    @classmethod
    def from_wire(cls, value: Any) -> "RuleKind":
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class ProtectionRule:
    kind: RuleKind
    parameters: Dict[str, Any] = field(default_factory=dict)


ProtectionRuleSet = Tuple[ProtectionRule, ...]


@dataclass(frozen=True)
class RequiredChecks:
    """Required status-check names; set semantics, first-seen order for display."""

    names: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)


@dataclass(frozen=True)
class CommitRef:
    sha: str
    author_login: str


@dataclass(frozen=True)
class PullRequestLink:
    number: int
    head_sha: str


@dataclass(frozen=True)
class CheckRun:
    name: str
    conclusion: Optional[str]
    suite_id: int


@dataclass(frozen=True)
class ReviewRecord:
    state: str


@dataclass(frozen=True)
class CheckOutcome:
    name: str
    state: Optional[str]

    @property
    def passed(self) -> bool:
        return self.state == CHECK_SUCCESS


@dataclass(frozen=True)
class CheckReconciliation:
    skipped: bool
    outcomes: Tuple[CheckOutcome, ...] = ()

    @property
    def any_failed(self) -> bool:
        return any(not outcome.passed for outcome in self.outcomes)

    @property
    def failed(self) -> List[CheckOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.passed]


@dataclass(frozen=True)
class ReviewAssessment:
    required: int
    approved: Optional[int] = None

    @property
    def evaluated(self) -> bool:
        return self.required > 0 and self.approved is not None

    @property
    def sufficient(self) -> bool:
        if self.required <= 0:
            return True
        return (self.approved or 0) >= self.required


@dataclass(frozen=True)
class BypassVerdict:
    detected: bool
    actor: str
    from_pull_request: bool


@dataclass(frozen=True)
class BypassReport:
    owner: str
    repo: str
    branch: str
    sha: str
    verdict: BypassVerdict
    required_checks: RequiredChecks
    pull_request: Optional[PullRequestLink]
    checks: CheckReconciliation
    reviews: ReviewAssessment
    reasons: Tuple[BypassReason, ...] = ()

    @property
    def repo_full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
