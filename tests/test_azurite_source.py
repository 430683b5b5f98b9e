#!filepath: tests/test_azurite_source.py
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

import pytest

from azstore_app.storage.azurite import AzuriteLogSource
from azstore_app.storage.errors import ErrorKind, ReattachError, SourceStartError
from azstore_app.storage.settings import AzuriteSettings


def _source(docker: Path) -> AzuriteLogSource:
    settings = AzuriteSettings(
        AZSTORE_DOCKER_BIN=str(docker), AZSTORE_AZURITE_STARTUP_DELAY=0
    )
    return AzuriteLogSource(settings)


def _calls(docker: Path) -> List[str]:
    return (docker.parent / "calls.txt").read_text(encoding="utf-8").splitlines()


async def _collect(stream) -> List[str]:
    lines = [line async for line in stream]
    await stream.aclose()
    return lines


def test_start_uses_running_container(fake_docker: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAKE_DOCKER_ID", "abc123")
    source = _source(fake_docker)

    async def scenario() -> List[str]:
        stream = await source.start()
        return await _collect(stream)

    lines = asyncio.run(scenario())
    assert lines[:3] == [
        "Starting Azurite...",
        "Using existing Azurite container: abc123",
        "Attaching to Azurite logs...",
    ]
    assert sorted(lines[3:]) == ["line one", "line two", "warn on stderr"]
    assert source.container_id == "abc123"
    assert "logs -f abc123" in _calls(fake_docker)


def test_start_creates_missing_container(fake_docker: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FAKE_DOCKER_ID", raising=False)
    source = _source(fake_docker)

    async def scenario() -> List[str]:
        stream = await source.start()
        return await _collect(stream)

    lines = asyncio.run(scenario())
    assert "Azurite container started: newcontainer123" in lines
    run_call = next(c for c in _calls(fake_docker) if c.startswith("run"))
    assert run_call == (
        "run -d --name azurite-emulator -p 10000:10000 -p 10001:10001 -p 10002:10002"
        " -v azurite_data:/data mcr.microsoft.com/azure-storage/azurite"
    )
    assert source.container_id == "newcontainer123"


def test_start_restarts_stopped_container(fake_docker: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAKE_DOCKER_ID", "abc123")
    monkeypatch.setenv("FAKE_DOCKER_RUNNING", "false")
    source = _source(fake_docker)

    async def scenario() -> List[str]:
        stream = await source.start()
        return await _collect(stream)

    lines = asyncio.run(scenario())
    assert lines[1:3] == [
        "Started existing Azurite container: abc123",
        "Using existing Azurite container: abc123",
    ]
    assert "start abc123" in _calls(fake_docker)


def test_failed_run_raises_start_error(fake_docker: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FAKE_DOCKER_ID", raising=False)
    monkeypatch.setenv("FAKE_DOCKER_FAIL_RUN", "1")
    source = _source(fake_docker)
    with pytest.raises(SourceStartError) as info:
        asyncio.run(source.start())
    assert info.value.kind is ErrorKind.SOURCE_START
    assert info.value.details.exit_code == 1
    assert "daemon not running" in str(info.value)


def test_missing_docker_binary_raises_start_error(tmp_path: Path) -> None:
    source = _source(tmp_path / "no-such-docker")
    with pytest.raises(SourceStartError):
        asyncio.run(source.start())


def test_current_handle_is_empty_without_docker(tmp_path: Path) -> None:
    source = _source(tmp_path / "no-such-docker")
    assert asyncio.run(source.current_handle_id()) == ""


def test_attach_to_requires_a_handle(fake_docker: Path) -> None:
    source = _source(fake_docker)
    with pytest.raises(ReattachError):
        asyncio.run(source.attach_to(""))


def test_attach_to_streams_logs(fake_docker: Path) -> None:
    source = _source(fake_docker)

    async def scenario() -> List[str]:
        stream = await source.attach_to("abc123")
        return await _collect(stream)

    lines = asyncio.run(scenario())
    assert lines[0] == "Attaching to Azurite logs..."
    assert "line one" in lines
    assert source.container_id == "abc123"


def test_stop_stops_current_container(fake_docker: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAKE_DOCKER_ID", "abc123")
    source = _source(fake_docker)

    async def scenario() -> None:
        stream = await source.start()
        await stream.aclose()
        await source.stop()
        await source.stop()

    asyncio.run(scenario())
    assert _calls(fake_docker).count("stop abc123") == 1
    assert source.container_id == ""


def test_status_is_reported_as_each_step_happens(
    fake_docker: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("FAKE_DOCKER_ID", "abc123")
    monkeypatch.setenv("FAKE_DOCKER_RUNNING", "false")
    source = _source(fake_docker)
    seen: List[tuple] = []

    def on_status(line: str) -> None:
        seen.append((line, len(_calls(fake_docker))))

    async def scenario() -> List[str]:
        stream = await source.start(on_status=on_status)
        return await _collect(stream)

    lines = asyncio.run(scenario())
    assert seen == [
        ("Starting Azurite...", 0),
        ("Started existing Azurite container: abc123", 3),
        ("Using existing Azurite container: abc123", 3),
    ]
    assert lines[0] == "Attaching to Azurite logs..."
    assert "Starting Azurite..." not in lines
