#!filepath: src/azstore_app/tui/scrollback.py
from __future__ import annotations

from collections import deque
from itertools import islice
from typing import Deque, Tuple


class ScrollbackBuffer:
    """Fixed capacity log history with FIFO eviction.

    Written by the ingestion pipeline only. Every access happens on the event
    loop, so reads and writes never interleave.
    """

    def __init__(self, *, capacity: int = 500) -> None:
        if int(capacity) < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = int(capacity)
        self._lines: Deque[str] = deque(maxlen=self._capacity)
        self._appended = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def total_appended(self) -> int:
        return self._appended

    def __len__(self) -> int:
        return len(self._lines)

    def length(self) -> int:
        return len(self._lines)

    def append(self, line: str) -> int:
        """Append one line.

        Args:
            line: Text without trailing newline.

        Returns:
            int: Number of lines evicted to stay within capacity (0 or 1).
        """
        evicted = 1 if len(self._lines) == self._capacity else 0
        self._lines.append(line)
        self._appended += 1
        return evicted

    def slice(self, start: int, end: int) -> Tuple[str, ...]:
        """Return lines in ``[start, end)``, with ``end`` clamped to the length."""
        start = max(0, int(start))
        end = min(int(end), len(self._lines))
        if end <= start:
            return ()
        return tuple(islice(self._lines, start, end))

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self._lines)

    def clear(self) -> None:
        self._lines.clear()
