#!filepath: src/azstore_app/tui/viewport.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable


@dataclass(frozen=True, slots=True)
class ViewportState:
    """Visible window into a line sequence.

    Attributes:
        origin: Index of the first visible line.
        visible_height: Number of visible rows, at least 1.
        follow_tail: Whether the window tracks newly appended lines.
    """

    origin: int = 0
    visible_height: int = 1
    follow_tail: bool = True


class ViewportController:
    """Scrolling and auto follow over a sequence whose length can change.

    The controller does not own the sequence: ``length`` is read on every
    operation, so the same controller works for the scrollback buffer and for
    catalog lists.

    Follow mode is left as soon as the user scrolls up, and resumed when a
    downward scroll lands on the last page or when ``follow()`` is called.
    """

    def __init__(
        self,
        length: Callable[[], int],
        *,
        visible_height: int = 1,
        follow_tail: bool = True,
    ) -> None:
        self._length = length
        self._state = ViewportState(
            origin=0, visible_height=max(1, int(visible_height)), follow_tail=follow_tail
        )
        if follow_tail:
            self._state = replace(self._state, origin=self.bottom())

    @property
    def state(self) -> ViewportState:
        return self._state

    @property
    def origin(self) -> int:
        return self._state.origin

    @property
    def visible_height(self) -> int:
        return self._state.visible_height

    @property
    def follow_tail(self) -> bool:
        return self._state.follow_tail

    def bottom(self, length: int | None = None) -> int:
        """Largest valid origin for the current length and height."""
        n = self._length() if length is None else length
        return max(0, n - self._state.visible_height)

    def at_bottom(self) -> bool:
        return self._state.origin >= self.bottom()

    def scroll_by(self, delta: int) -> ViewportState:
        """Move the origin by ``delta`` rows, clamped to the valid range.

        Args:
            delta: Negative scrolls towards older lines.

        Returns:
            ViewportState: The updated state.
        """
        bottom = self.bottom()
        origin = min(max(self._state.origin + int(delta), 0), bottom)
        follow = self._state.follow_tail
        if delta < 0 or origin != bottom:
            follow = False
        elif delta > 0:
            follow = True
        self._state = replace(self._state, origin=origin, follow_tail=follow)
        return self._state

    def page_up(self) -> ViewportState:
        return self.scroll_by(-self._state.visible_height)

    def page_down(self) -> ViewportState:
        return self.scroll_by(self._state.visible_height)

    def on_append(self) -> ViewportState:
        """Re-anchor after the underlying sequence grew or was truncated."""
        return self._reanchor()

    def resize(self, visible_height: int) -> ViewportState:
        h = max(1, int(visible_height))
        if h != self._state.visible_height:
            self._state = replace(self._state, visible_height=h)
        return self._reanchor()

    def follow(self) -> ViewportState:
        """Jump to the last page and resume following."""
        self._state = replace(self._state, origin=self.bottom(), follow_tail=True)
        return self._state

    def reset(self) -> ViewportState:
        self._state = replace(self._state, origin=0, follow_tail=True)
        return self._reanchor()

    def ensure_visible(self, index: int) -> ViewportState:
        """Scroll the least amount needed for row ``index`` to be on screen."""
        origin = self._state.origin
        h = self._state.visible_height
        if index < origin:
            origin = index
        elif index >= origin + h:
            origin = index - h + 1
        origin = min(max(origin, 0), self.bottom())
        self._state = replace(self._state, origin=origin)
        return self._state

    def _reanchor(self) -> ViewportState:
        bottom = self.bottom()
        if self._state.follow_tail:
            origin = bottom
        else:
            origin = min(self._state.origin, bottom)
        if origin != self._state.origin:
            self._state = replace(self._state, origin=origin)
        return self._state
