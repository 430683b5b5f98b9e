#!filepath: src/azstore_app/tui/navigation.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from azstore_app.catalog import Catalog


class Focus(str, Enum):
    CATEGORY_LIST = "category_list"
    ITEM_LIST = "item_list"
    LOG_PANEL = "log_panel"


class Key(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    FOLLOW = "follow"
    ENTER = "enter"
    ESCAPE = "escape"
    TOGGLE_LOGS = "toggle_logs"
    REATTACH = "reattach"
    QUIT = "quit"


class Command(str, Enum):
    """Side effects a key asks the application to perform."""

    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    FOLLOW = "follow"
    REATTACH = "reattach"
    QUIT = "quit"


_LOG_PANEL_COMMANDS = {
    Key.UP: Command.SCROLL_UP,
    Key.DOWN: Command.SCROLL_DOWN,
    Key.PAGE_UP: Command.PAGE_UP,
    Key.PAGE_DOWN: Command.PAGE_DOWN,
    Key.FOLLOW: Command.FOLLOW,
}


@dataclass(slots=True)
class NavigationState:
    """Focus and selection across the category list, item list and log panel.

    One key is handled at a time by `handle`, which only updates this object
    and returns the command, if any, that the caller must run.

    Attributes:
        catalog: Data being browsed.
        focus: Panel receiving navigation keys.
        selected_category: Index into the catalog categories.
        selected_item: Index into the items of the selected category.
        selected_entry: Index into the sub entries of the selected item.
        overlay_visible: Welcome overlay shown; it swallows every key except
            escape and quit.
        log_visible: Right panel shows logs instead of contents.
    """

    catalog: Catalog
    focus: Focus = Focus.CATEGORY_LIST
    selected_category: int = 0
    selected_item: int = 0
    selected_entry: int = 0
    overlay_visible: bool = True
    log_visible: bool = False

    @property
    def category_name(self) -> str:
        return self.catalog.category(self.selected_category).name

    @property
    def item_name(self) -> str | None:
        return self.catalog.item(self.selected_category, self.selected_item)

    def handle(self, key: Key) -> Optional[Command]:
        if key is Key.QUIT:
            return Command.QUIT
        if self.overlay_visible:
            if key is Key.ESCAPE:
                self.overlay_visible = False
            return None
        if key is Key.REATTACH:
            return Command.REATTACH
        if key is Key.TOGGLE_LOGS:
            self._toggle_logs()
            return None
        if self.focus is Focus.LOG_PANEL:
            return _LOG_PANEL_COMMANDS.get(key)
        if self.focus is Focus.ITEM_LIST:
            self._handle_item_list(key)
        else:
            self._handle_category_list(key)
        return None

    def _handle_category_list(self, key: Key) -> None:
        if key is Key.LEFT:
            self._select_category(self.selected_category - 1)
        elif key is Key.RIGHT:
            self._select_category(self.selected_category + 1)
        elif key is Key.UP:
            self.selected_item = max(self.selected_item - 1, 0)
        elif key is Key.DOWN:
            last = self.catalog.item_count(self.selected_category) - 1
            self.selected_item = max(min(self.selected_item + 1, last), 0)
        elif key is Key.ENTER:
            if not self.log_visible and self.catalog.item_count(self.selected_category) > 0:
                self.focus = Focus.ITEM_LIST
                self.selected_entry = 0

    def _handle_item_list(self, key: Key) -> None:
        if key is Key.UP:
            self.selected_entry = max(self.selected_entry - 1, 0)
        elif key is Key.DOWN:
            count = len(self.catalog.item_entries(self.selected_category, self.selected_item))
            self.selected_entry = max(min(self.selected_entry + 1, count - 1), 0)
        elif key is Key.ESCAPE:
            self.focus = Focus.CATEGORY_LIST
            self.selected_entry = 0

    def _select_category(self, index: int) -> None:
        index = min(max(index, 0), self.catalog.category_count - 1)
        if index != self.selected_category:
            self.selected_category = index
            self.selected_item = 0

    def _toggle_logs(self) -> None:
        self.log_visible = not self.log_visible
        self.selected_entry = 0
        self.focus = Focus.LOG_PANEL if self.log_visible else Focus.CATEGORY_LIST
