#!filepath: tests/test_cli.py
from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from azstore_app.cli import app

runner = CliRunner()


def test_stop_command_stops_existing_container(
    fake_docker: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("AZSTORE_DOCKER_BIN", str(fake_docker))
    monkeypatch.setenv("FAKE_DOCKER_ID", "abc123")
    result = runner.invoke(app, ["stop"])
    assert result.exit_code == 0
    assert "abc123" in result.output
    calls = (fake_docker.parent / "calls.txt").read_text(encoding="utf-8").splitlines()
    assert "stop abc123" in calls


def test_stop_command_without_container(
    fake_docker: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("AZSTORE_DOCKER_BIN", str(fake_docker))
    monkeypatch.delenv("FAKE_DOCKER_ID", raising=False)
    result = runner.invoke(app, ["stop"])
    assert result.exit_code == 1
