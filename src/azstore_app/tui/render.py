#!filepath: src/azstore_app/tui/render.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from azstore_app.catalog import Catalog
from azstore_app.tui.log_view import LogWindow
from azstore_app.tui.navigation import Focus, NavigationState
from azstore_app.tui.viewport import ViewportController

WELCOME_LINES: Tuple[str, ...] = (
    "Welcome to Azurite Local Storage Explorer",
    "",
    "[H/L] Switch Resource Type",
    "[J/K] Navigate",
    "[Enter] Open Selected",
    "[ESC] Return to Left Panel",
    "[Shift+L] Toggle Logs | [R] Reattach Logs",
    "[PgUp/PgDn] Page Logs | [G/End] Follow Logs",
    "[Q] Quit",
)

LOGS_TITLE = "Azurite Logs (press L to hide, r to reattach)"


@dataclass(frozen=True, slots=True)
class Row:
    text: str
    selected: bool = False


@dataclass(frozen=True, slots=True)
class Panel:
    """A titled box of rows."""

    title: str
    rows: Tuple[Row, ...]
    focused: bool = False
    active: bool = False


@dataclass(frozen=True, slots=True)
class RenderPlan:
    """Everything the screen shows for one redraw.

    Attributes:
        categories: One panel per catalog category, in order.
        right: Contents of the selected item, or the log panel.
        overlay: Welcome text when the overlay is visible.
        status: Footer status text.
    """

    categories: Tuple[Panel, ...]
    right: Panel
    overlay: Optional[Tuple[str, ...]]
    status: str


def list_window(selected: int, count: int, height: int) -> Tuple[int, int]:
    """Return the ``[start, end)`` rows of a list to show so ``selected`` is visible."""
    if height <= 0 or count <= 0:
        return 0, 0
    vp = ViewportController(lambda: count, visible_height=height, follow_tail=False)
    vp.ensure_visible(min(max(selected, 0), count - 1))
    return vp.origin, min(count, vp.origin + height)


def _rows(names: Tuple[str, ...], selected: Optional[int], height: Optional[int]) -> Tuple[Row, ...]:
    start, end = 0, len(names)
    if height is not None:
        start, end = list_window(selected or 0, len(names), height)
    rows: List[Row] = []
    for i in range(start, end):
        mark = selected is not None and i == selected
        rows.append(Row(text=f"{'> ' if mark else '  '}{names[i]}", selected=mark))
    return tuple(rows)


def _category_panels(
    nav: NavigationState, catalog: Catalog, list_height: Optional[int]
) -> Tuple[Panel, ...]:
    panels: List[Panel] = []
    for i, category in enumerate(catalog.categories):
        active = i == nav.selected_category
        focused = active and nav.focus is Focus.CATEGORY_LIST
        selected = nav.selected_item if focused else None
        panels.append(
            Panel(
                title=category.name,
                rows=_rows(category.items, selected, list_height),
                focused=focused,
                active=active,
            )
        )
    return tuple(panels)


def _contents_panel(nav: NavigationState, catalog: Catalog, height: Optional[int]) -> Panel:
    title = f"Contents of {nav.category_name}"
    if catalog.item_count(nav.selected_category) == 0:
        return Panel(title=title, rows=(Row("No items found."),))
    if not catalog.has_entries(nav.selected_category, nav.selected_item):
        return Panel(title=title, rows=(Row("No blobs or contents found."),))
    entries = catalog.item_entries(nav.selected_category, nav.selected_item)
    focused = nav.focus is Focus.ITEM_LIST
    selected = nav.selected_entry if focused else None
    return Panel(title=title, rows=_rows(entries, selected, height), focused=focused, active=True)


def _logs_panel(window: LogWindow) -> Panel:
    return Panel(
        title=LOGS_TITLE,
        rows=tuple(Row(line) for line in window.lines),
        focused=True,
        active=True,
    )


def _status(nav: NavigationState, window: Optional[LogWindow]) -> str:
    if nav.log_visible and window is not None:
        mode = "follow" if window.follow_tail else f"scrolled, {window.hidden_below} below"
        return f"logs {window.origin + len(window.lines)}/{window.length} [{mode}]"
    item = nav.item_name or "-"
    return f"{nav.category_name} / {item}"


def build_render_plan(
    nav: NavigationState,
    catalog: Catalog,
    window: Optional[LogWindow] = None,
    *,
    list_height: Optional[int] = None,
    content_height: Optional[int] = None,
) -> RenderPlan:
    """Compute what each panel shows from the current state.

    Args:
        nav: Navigation state.
        catalog: Browsed data.
        window: Log window snapshot, required when logs are visible.
        list_height: Rows available in each category box, None for unlimited.
        content_height: Rows available in the contents panel.

    Returns:
        RenderPlan: Panels for the screen.
    """
    if nav.log_visible:
        right = _logs_panel(window or LogWindow((), 0, 0, 1, True))
    else:
        right = _contents_panel(nav, catalog, content_height)
    return RenderPlan(
        categories=_category_panels(nav, catalog, list_height),
        right=right,
        overlay=WELCOME_LINES if nav.overlay_visible else None,
        status=_status(nav, window),
    )
