#!src/azstore_app/storage/base.py
from __future__ import annotations

from typing import AsyncIterator, Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class LogStream(Protocol):
    """A lazy, non restartable sequence of log lines.

    Iteration ends when the underlying source stops.
    """

    def __aiter__(self) -> AsyncIterator[str]:
        ...

    async def aclose(self) -> None:
        """Release the underlying reader. Safe to call more than once."""


class LogSource(Protocol):
    """Something that produces log lines and can be reattached by handle."""

    async def start(
        self, on_status: Optional[Callable[[str], None]] = None
    ) -> LogStream:
        """Start the source and return its stream.

        Progress lines go to ``on_status`` as they happen, or lead the stream
        when no callback is given.

        Raises:
            SourceStartError: If the source cannot be started.
        """

    async def stop(self) -> None:
        """Stop the source."""

    async def current_handle_id(self) -> str:
        """Return the handle of the running source, or an empty string."""

    async def attach_to(self, handle_id: str) -> LogStream:
        """Open a fresh stream for an existing handle.

        Raises:
            ReattachError: If no stream can be obtained.
        """
