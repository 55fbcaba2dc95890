from __future__ import annotations

from enum import Enum


class ExitCode(int, Enum):
    """Process exit codes."""

    SUCCESS = 0
    BYPASS = 1
    ERROR = 2


UNKNOWN_ACTOR = "unknown"
CHECK_SUCCESS = "success"
REVIEW_APPROVED = "APPROVED"
DEFAULT_BRANCH = "main"
