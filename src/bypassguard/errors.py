from __future__ import annotations

from typing import Optional

from .constants import ExitCode


class BypassGuardError(Exception):
    """Base exception for all bypass guard errors."""

    exit_code: ExitCode = ExitCode.ERROR


class ConfigError(BypassGuardError):
    """Action inputs or workflow context are invalid."""

    exit_code = ExitCode.ERROR


class TransportError(BypassGuardError):
    """A GitHub API lookup failed; the audit is aborted."""

    exit_code = ExitCode.ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BypassDetectedError(BypassGuardError):
    """Bypass detected while fail_on_bypass is set (policy outcome, not a fault)."""

    exit_code = ExitCode.BYPASS
