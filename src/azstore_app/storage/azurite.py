#!filepath: src/azstore_app/storage/azurite.py
from __future__ import annotations

import asyncio
import contextlib
from typing import AsyncGenerator, Callable, List, Optional, Sequence, Tuple

from azstore_app.storage.errors import (
    ErrorKind,
    LogSourceError,
    LogSourceErrorDetails,
    ReattachError,
    SourceStartError,
)
from azstore_app.storage.settings import AzuriteSettings
from azstore_app.utils.logger import get_logger

logger = get_logger(__name__)

_READ_LIMIT = 1 << 20


class ProcessLogStream:
    """Lines of a `docker logs -f` process, preceded by status lines."""

    def __init__(
        self,
        proc: Optional[asyncio.subprocess.Process],
        *,
        preamble: Sequence[str] = (),
    ) -> None:
        self._proc = proc
        self._preamble = tuple(preamble)
        self._closed = False
        self._lines = self._read_lines()

    def __aiter__(self) -> AsyncGenerator[str, None]:
        return self._lines

    async def _read_lines(self) -> AsyncGenerator[str, None]:
        for line in self._preamble:
            yield line
        if self._proc is None or self._proc.stdout is None:
            return
        while True:
            raw = await self._proc.stdout.readline()
            if not raw:
                break
            yield raw.decode("utf-8", errors="replace").rstrip("\r\n")

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        proc = self._proc
        if proc is None:
            return
        if proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.terminate()
        await proc.wait()


class AzuriteLogSource:
    """Runs the Azurite emulator through the docker CLI and tails its logs."""

    def __init__(self, settings: Optional[AzuriteSettings] = None) -> None:
        self._settings = settings or AzuriteSettings()
        self._container_id = ""

    @property
    def settings(self) -> AzuriteSettings:
        return self._settings

    @property
    def container_id(self) -> str:
        return self._container_id

    async def start(
        self, on_status: Optional[Callable[[str], None]] = None
    ) -> ProcessLogStream:
        preamble: List[str] = []
        report = on_status or preamble.append
        report("Starting Azurite...")
        try:
            cid = await self._lookup_container()
            if not cid:
                cid = await self._create_container()
                report(f"Azurite container started: {cid}")
                await asyncio.sleep(self._settings.startup_delay_s)
            else:
                if not await self._is_running(cid):
                    await self._checked("start", cid)
                    report(f"Started existing Azurite container: {cid}")
                    await asyncio.sleep(self._settings.startup_delay_s)
                report(f"Using existing Azurite container: {cid}")
            self._container_id = cid
            return await self._follow_logs(cid, preamble)
        except SourceStartError:
            raise
        except LogSourceError as e:
            raise SourceStartError(
                LogSourceErrorDetails(
                    kind=ErrorKind.SOURCE_START,
                    command=e.details.command,
                    exit_code=e.details.exit_code,
                    message=str(e),
                    output=e.details.output,
                )
            ) from e

    async def stop(self) -> None:
        if self._container_id and await self.stop_container(self._container_id):
            self._container_id = ""

    async def stop_container(self, cid: str) -> bool:
        """Stop a container without removing it.

        Returns:
            bool: True if docker reported success.
        """
        try:
            code, out = await self._run("stop", cid)
        except LogSourceError as e:
            logger.warning(f"Could not stop Azurite container {cid}: {e}")
            return False
        if code != 0:
            logger.warning(f"docker stop {cid} exited with {code}: {out.strip()}")
            return False
        logger.info(f"Stopped Azurite container {cid}")
        return True

    async def current_handle_id(self) -> str:
        try:
            cid = await self._lookup_container()
        except LogSourceError as e:
            logger.debug(f"Container lookup failed: {e}")
            return ""
        return cid

    async def attach_to(self, handle_id: str) -> ProcessLogStream:
        if not handle_id:
            raise ReattachError(
                LogSourceErrorDetails(
                    kind=ErrorKind.REATTACH,
                    message=f"no container named {self._settings.container_name}",
                )
            )
        try:
            stream = await self._follow_logs(handle_id, [])
        except LogSourceError as e:
            raise ReattachError(
                LogSourceErrorDetails(
                    kind=ErrorKind.REATTACH,
                    handle_id=handle_id,
                    command=e.details.command,
                    message=str(e),
                )
            ) from e
        self._container_id = handle_id
        return stream

    async def _lookup_container(self) -> str:
        code, out = await self._run(
            "ps", "-aq", "--filter", f"name={self._settings.container_name}"
        )
        if code != 0:
            return ""
        ids = out.split()
        return ids[0] if ids else ""

    async def _create_container(self) -> str:
        args: List[str] = ["run", "-d", "--name", self._settings.container_name]
        for port in self._settings.ports:
            args += ["-p", f"{port}:{port}"]
        args += ["-v", f"{self._settings.volume}:/data", self._settings.image]
        out = await self._checked(*args)
        lines = out.strip().splitlines()
        return lines[-1].strip() if lines else ""

    async def _is_running(self, cid: str) -> bool:
        _, out = await self._run("inspect", "-f", "{{.State.Running}}", cid)
        return out.strip() == "true"

    async def _follow_logs(self, cid: str, preamble: Sequence[str]) -> ProcessLogStream:
        cmd = [self._settings.docker_bin, "logs", "-f", cid]
        logger.info(f"EXEC: {' '.join(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                limit=_READ_LIMIT,
            )
        except OSError as e:
            raise LogSourceError(
                LogSourceErrorDetails(
                    kind=ErrorKind.UNKNOWN,
                    handle_id=cid,
                    command="logs",
                    message=f"failed to start log stream: {e}",
                )
            ) from e
        return ProcessLogStream(proc, preamble=[*preamble, "Attaching to Azurite logs..."])

    async def _checked(self, *args: str) -> str:
        code, out = await self._run(*args)
        if code != 0:
            raise SourceStartError(
                LogSourceErrorDetails(
                    kind=ErrorKind.SOURCE_START,
                    command=args[0],
                    exit_code=code,
                    message=f"docker {args[0]} exited with {code}: {out.strip()}",
                    output=out,
                )
            )
        return out

    async def _run(self, *args: str) -> Tuple[int, str]:
        cmd = [self._settings.docker_bin, *args]
        logger.debug(f"EXEC: {' '.join(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise LogSourceError(
                LogSourceErrorDetails(
                    kind=ErrorKind.UNKNOWN,
                    command=args[0] if args else None,
                    message=f"failed to run {cmd[0]}: {e}",
                )
            ) from e
        raw, _ = await proc.communicate()
        return int(proc.returncode or 0), raw.decode("utf-8", errors="replace")
