from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def event_push_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "event_push.json"


@pytest.fixture(autouse=True)
def _isolate_actions_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "GITHUB_OUTPUT",
        "GITHUB_STEP_SUMMARY",
        "GITHUB_EVENT_PATH",
        "GITHUB_REPOSITORY",
        "GITHUB_SHA",
        "INPUT_OWNER",
        "INPUT_REPO",
        "INPUT_SHA",
        "INPUT_BRANCH",
        "INPUT_FAIL_ON_BYPASS",
        "INPUT_GITHUB_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
