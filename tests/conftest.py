"""Pytest configuration for issuebot tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`).
"""

from __future__ import annotations

import sys
import time
import textwrap
from pathlib import Path

import pytest

_TEST_START_TIMES: dict[str, float] = {}
_TEST_DURATIONS: list[tuple[str, float]] = []

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

HAPPY_CONFIG = textwrap.dedent(
    """\
    states:
      - label: open
        description: Newly opened issue
        transitions:
          - description: Mark inactive issues as stale
            conditions:
              - type: timeout
                timeout: 10
            actions:
              - type: add-label
                label: stale
          - description: Close resolved issues
            conditions:
              - type: label
                label: resolved
            actions:
              - type: close
      - label: stale
        description: Issue without recent activity
        transitions:
          - description: Close resolved issues
            conditions:
              - type: label
                label: resolved
            actions:
              - type: close
    """
)


@pytest.fixture(autouse=True)
def _fresh_logger(monkeypatch: pytest.MonkeyPatch) -> None:
    # The global logger binds sys.stdout when created; rebuild it per test so
    # capsys sees the output and no handler points at a closed capture stream.
    import issuebot.logging as issuebot_logging

    monkeypatch.setattr(issuebot_logging, "_GLOBAL", None)
    for name in ("ISSUEBOT_LOG_LEVEL", "ISSUEBOT_LOG_JSON", "ISSUEBOT_QUIET"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def happy_config_text() -> str:
    return HAPPY_CONFIG


@pytest.fixture
def happy_config_path(tmp_path: Path) -> Path:
    path = tmp_path / "issuebot.yaml"
    path.write_text(HAPPY_CONFIG, encoding="utf-8")
    return path


# --- Timing utilities to help identify slow/stalling tests ---


def pytest_runtest_setup(item):  # type: ignore
    _TEST_START_TIMES[item.nodeid] = time.perf_counter()


def pytest_runtest_teardown(item):  # type: ignore
    start = _TEST_START_TIMES.pop(item.nodeid, None)
    if start is not None:
        duration = time.perf_counter() - start
        _TEST_DURATIONS.append((item.nodeid, duration))


def pytest_sessionfinish(session, exitstatus):  # type: ignore
    if not _TEST_DURATIONS:
        return
    slow = sorted(_TEST_DURATIONS, key=lambda x: x[1], reverse=True)[:10]
    print("\n=== Slowest Tests (top 10) ===")
    for nodeid, secs in slow:
        print(f"{secs:0.3f}s  {nodeid}")
    total_time = sum(d for _, d in _TEST_DURATIONS)
    print(
        f"Total recorded test time: {total_time:0.3f}s over {len(_TEST_DURATIONS)} tests"
    )
