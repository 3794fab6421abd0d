"""Fixtures for running the supervisor as a separate process."""

import os
import subprocess
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def child_script(tmp_path: Path) -> Callable[[str], list[str]]:
    """Write a Python snippet to a file and return the argv to run it."""

    def _make(source: str, name: str = "child.py") -> list[str]:
        script = tmp_path / name
        script.write_text(source)
        return [sys.executable, str(script)]

    return _make


@pytest.fixture
def run_testrunner() -> Callable[..., subprocess.CompletedProcess[str]]:
    """Invoke ``python -m testrunner`` and capture its output."""

    def _run(
        args: Sequence[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        timeout: float = 60,
    ) -> subprocess.CompletedProcess[str]:
        environ = {**os.environ, **(env or {})}
        environ["PYTHONPATH"] = os.pathsep.join(
            filter(None, [str(REPO_ROOT), environ.get("PYTHONPATH")])
        )
        return subprocess.run(
            [sys.executable, "-m", "testrunner", *args],
            cwd=cwd,
            env=environ,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            timeout=timeout,
            check=False,
        )

    return _run
