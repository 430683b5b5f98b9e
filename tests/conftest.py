#!filepath: tests/conftest.py
from __future__ import annotations

import os
import stat
import sys
import tempfile
from pathlib import Path

import pytest


def pytest_configure() -> None:
    """Ensure src layout is importable and keep test logs out of the repo."""
    root = Path(__file__).resolve().parents[1]
    src = (root / "src").resolve()
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))
    os.environ.setdefault("AZSTORE_LOG_DIR", tempfile.mkdtemp(prefix="azstore-logs-"))


FAKE_DOCKER = """#!/bin/sh
echo "$@" >> "$FAKE_DOCKER_CALLS"
case "$1" in
  ps) if [ -n "$FAKE_DOCKER_ID" ]; then echo "$FAKE_DOCKER_ID"; fi ;;
  run) if [ -n "$FAKE_DOCKER_FAIL_RUN" ]; then echo "daemon not running" >&2; exit 1; fi
       echo "newcontainer123" ;;
  inspect) echo "${FAKE_DOCKER_RUNNING:-true}" ;;
  start) echo "$2" ;;
  stop) echo "$2" ;;
  logs) printf 'line one\\nline two\\n'; echo "warn on stderr" >&2 ;;
esac
"""


@pytest.fixture()
def fake_docker(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A shell script standing in for the docker CLI; calls go to calls.txt."""
    script = tmp_path / "docker"
    script.write_text(FAKE_DOCKER, encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    calls = tmp_path / "calls.txt"
    calls.write_text("", encoding="utf-8")
    monkeypatch.setenv("FAKE_DOCKER_CALLS", str(calls))
    return script
