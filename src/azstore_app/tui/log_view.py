#!filepath: src/azstore_app/tui/log_view.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from azstore_app.tui.scrollback import ScrollbackBuffer
from azstore_app.tui.viewport import ViewportController


@dataclass(frozen=True, slots=True)
class LogWindow:
    """Consistent view of the log panel taken at the start of a render."""

    lines: Tuple[str, ...]
    origin: int
    length: int
    visible_height: int
    follow_tail: bool

    @property
    def hidden_below(self) -> int:
        return max(0, self.length - (self.origin + len(self.lines)))


class LogView:
    """Scrollback buffer and its viewport, always mutated together."""

    def __init__(self, *, capacity: int = 500, visible_height: int = 1) -> None:
        self._buffer = ScrollbackBuffer(capacity=capacity)
        self._viewport = ViewportController(
            self._buffer.length, visible_height=visible_height
        )

    @property
    def buffer(self) -> ScrollbackBuffer:
        return self._buffer

    @property
    def viewport(self) -> ViewportController:
        return self._viewport

    def append(self, line: str) -> None:
        self._buffer.append(line)
        self._viewport.on_append()

    def reset(self) -> None:
        self._buffer.clear()
        self._viewport.reset()

    def window(self) -> LogWindow:
        length = self._buffer.length()
        state = self._viewport.state
        origin = min(state.origin, max(0, length - state.visible_height))
        lines = self._buffer.slice(origin, origin + state.visible_height)
        return LogWindow(
            lines=lines,
            origin=origin,
            length=length,
            visible_height=state.visible_height,
            follow_tail=state.follow_tail,
        )
