#!filepath: src/azstore_app/tui/pipeline.py
from __future__ import annotations

import asyncio
import contextlib
from enum import Enum
from typing import Callable, Optional, Tuple

from azstore_app.storage.base import LogSource, LogStream
from azstore_app.storage.errors import ReattachError, SourceStartError
from azstore_app.tui.log_view import LogView, LogWindow
from azstore_app.tui.viewport import ViewportState
from azstore_app.utils.logger import get_logger

logger = get_logger(__name__)

# (generation, line); a None line marks the end of that generation's stream
_Item = Tuple[int, Optional[str]]


class PipelineStatus(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    ENDED = "ended"
    FAILED = "failed"
    STOPPED = "stopped"


class LogIngestionPipeline:
    """Moves lines from a log source into the scrollback buffer.

    A reader task awaits the source and puts lines on a bounded queue, so a
    slow consumer suspends the reader instead of growing memory. A single
    consumer task owns the `LogView` (buffer and viewport together) and is the
    only writer. Lines carry the generation of the stream that produced them;
    after a reattach, anything from an older generation is dropped.

    Scroll and resize commands run on the same event loop as the consumer, so
    a render always sees buffer and viewport from the same turn.
    """

    def __init__(
        self,
        source: LogSource,
        *,
        capacity: int = 500,
        queue_size: int = 200,
        visible_height: int = 1,
        on_new_data: Optional[Callable[[], None]] = None,
        should_notify: Optional[Callable[[], bool]] = None,
    ) -> None:
        self._source = source
        self._view = LogView(capacity=capacity, visible_height=visible_height)
        self._queue: asyncio.Queue[_Item] = asyncio.Queue(maxsize=max(1, int(queue_size)))
        self._on_new_data = on_new_data
        self._should_notify = should_notify
        self._generation = 0
        self._stream: Optional[LogStream] = None
        self._reader: Optional[asyncio.Task[None]] = None
        self._consumer: Optional[asyncio.Task[None]] = None
        self._reattach_lock = asyncio.Lock()
        self._status = PipelineStatus.IDLE

    @property
    def status(self) -> PipelineStatus:
        return self._status

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def view(self) -> LogView:
        return self._view

    @property
    def reader_running(self) -> bool:
        return self._reader is not None and not self._reader.done()

    async def start(self) -> None:
        """Start consuming and ask the source for its stream.

        Status lines from the source land in the buffer while it starts. A
        source that fails to start leaves one error line in the buffer.
        Serialized with `reattach`, so only one reader ever runs.
        """
        if self._consumer is None or self._consumer.done():
            self._consumer = asyncio.create_task(self._consume(), name="log-consumer")
        async with self._reattach_lock:
            try:
                stream = await self._source.start(on_status=self.append)
            except SourceStartError as e:
                logger.warning(f"Log source failed to start: {e}")
                self._status = PipelineStatus.FAILED
                self.append(f"Error starting log source: {e}")
                return
            await self._stop_reader()
            self._launch(stream)

    async def reattach(self) -> bool:
        """Replace the active stream with a fresh one for the current handle.

        On success the buffer and viewport start over. On failure the running
        reader and the buffer are left as they were and an error line is added.

        Returns:
            bool: True if a new stream is being consumed.
        """
        async with self._reattach_lock:
            handle = await self._source.current_handle_id()
            try:
                stream = await self._source.attach_to(handle)
            except ReattachError as e:
                logger.warning(f"Reattach failed for handle {e.handle_id or handle!r}: {e}")
                self.append(f"Error reattaching logs: {e}")
                return False
            await self._stop_reader()
            self._purge_queue()
            self._view.reset()
            self._launch(stream)
            logger.info(f"Reattached to {handle} (generation {self._generation})")
            return True

    async def shutdown(self, *, stop_source: bool = True) -> None:
        """Stop reader and consumer, then optionally stop the source."""
        self._generation += 1
        await self._stop_reader()
        if self._consumer is not None:
            self._consumer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer
            self._consumer = None
        self._purge_queue()
        if stop_source:
            await self._source.stop()
        self._status = PipelineStatus.STOPPED

    async def drain(self) -> None:
        """Wait for the current stream to end and its lines to reach the buffer."""
        reader = self._reader
        if reader is not None:
            await asyncio.wait({reader})
        await self._queue.join()

    def append(self, line: str) -> None:
        self._view.append(line)
        self._notify()

    def scroll_by(self, delta: int) -> ViewportState:
        return self._view.viewport.scroll_by(delta)

    def page_up(self) -> ViewportState:
        return self._view.viewport.page_up()

    def page_down(self) -> ViewportState:
        return self._view.viewport.page_down()

    def follow(self) -> ViewportState:
        return self._view.viewport.follow()

    def resize(self, visible_height: int) -> ViewportState:
        return self._view.viewport.resize(visible_height)

    def window(self) -> LogWindow:
        return self._view.window()

    def _launch(self, stream: LogStream) -> None:
        self._generation += 1
        self._stream = stream
        self._status = PipelineStatus.STREAMING
        self._reader = asyncio.create_task(
            self._read(stream, self._generation), name=f"log-reader-{self._generation}"
        )

    async def _read(self, stream: LogStream, generation: int) -> None:
        try:
            async for line in stream:
                await self._queue.put((generation, line.rstrip("\r\n")))
        except (OSError, ValueError) as e:
            logger.warning(f"Log stream read failed: {e}")
            await self._queue.put((generation, f"Error reading logs: {e}"))
        finally:
            await stream.aclose()
        await self._queue.put((generation, None))

    async def _consume(self) -> None:
        while True:
            generation, line = await self._queue.get()
            try:
                if generation != self._generation:
                    continue
                if line is None:
                    logger.info(f"Log stream ended (generation {generation})")
                    self._status = PipelineStatus.ENDED
                    continue
                self.append(line)
            finally:
                self._queue.task_done()

    async def _stop_reader(self) -> None:
        reader, self._reader = self._reader, None
        self._stream = None
        if reader is None:
            return
        reader.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await reader

    def _purge_queue(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            self._queue.task_done()

    def _notify(self) -> None:
        if self._on_new_data is None:
            return
        if self._should_notify is not None and not self._should_notify():
            return
        self._on_new_data()
