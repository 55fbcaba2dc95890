from __future__ import annotations

import os

from ..models import BypassVerdict


def _bool_output(value: bool) -> str:
    return "true" if value else "false"


def write_github_outputs(verdict: BypassVerdict) -> None:
    """Write GitHub Actions outputs."""
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        return

    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"merge_bypass_detected={_bool_output(verdict.detected)}\n")
        f.write(f"commit_actor={verdict.actor}\n")
        f.write(f"commit_from_pr={_bool_output(verdict.from_pull_request)}\n")
