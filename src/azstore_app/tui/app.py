#!filepath: src/azstore_app/tui/app.py
from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime
from functools import partial
from typing import Any, Callable, Coroutine, Dict, List, Optional, Set, Tuple

from prompt_toolkit.application import Application
from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import (
    ConditionalContainer,
    Float,
    FloatContainer,
    HSplit,
    Layout,
    VSplit,
    Window,
)
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from azstore_app.catalog import Catalog, default_catalog
from azstore_app.storage.azurite import AzuriteLogSource
from azstore_app.storage.base import LogSource
from azstore_app.tui.navigation import Command, Key, NavigationState
from azstore_app.tui.pipeline import LogIngestionPipeline
from azstore_app.tui.render import Panel, RenderPlan, build_render_plan
from azstore_app.tui.settings import TuiSettings
from azstore_app.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

Fragments = List[Tuple[str, str]]

KEY_NAMES: Dict[Key, Tuple[str, ...]] = {
    Key.LEFT: ("h", "left"),
    Key.RIGHT: ("l", "right"),
    Key.DOWN: ("j", "down"),
    Key.UP: ("k", "up"),
    Key.PAGE_UP: ("pageup",),
    Key.PAGE_DOWN: ("pagedown",),
    Key.FOLLOW: ("G", "end"),
    Key.ENTER: ("enter",),
    Key.ESCAPE: ("escape",),
    Key.TOGGLE_LOGS: ("L",),
    Key.REATTACH: ("r",),
    Key.QUIT: ("q", "c-c"),
}

# header, footer and the two border rows of a frame
_CHROME_ROWS = 4


class StorageExplorerTui:
    """Full screen explorer for the local Azurite emulator."""

    def __init__(
        self,
        settings: Optional[TuiSettings] = None,
        *,
        source: Optional[LogSource] = None,
        catalog: Optional[Catalog] = None,
    ) -> None:
        self._settings = settings or TuiSettings()
        self._catalog = catalog or default_catalog()
        self._nav = NavigationState(catalog=self._catalog)
        self._source = source or AzuriteLogSource()
        self._pipeline = LogIngestionPipeline(
            self._source,
            capacity=int(self._settings.max_log_lines),
            queue_size=int(self._settings.queue_size),
            on_new_data=self._invalidate,
            should_notify=lambda: self._nav.log_visible,
        )
        self._tasks: Set[asyncio.Task[Any]] = set()
        self._plan: RenderPlan = build_render_plan(self._nav, self._catalog)

        self._commands: Dict[Command, Callable[[], object]] = {
            Command.SCROLL_UP: partial(self._pipeline.scroll_by, -1),
            Command.SCROLL_DOWN: partial(self._pipeline.scroll_by, 1),
            Command.PAGE_UP: self._pipeline.page_up,
            Command.PAGE_DOWN: self._pipeline.page_down,
            Command.FOLLOW: self._pipeline.follow,
            Command.REATTACH: lambda: self._spawn(self._pipeline.reattach()),
        }

        self._kb = self._build_key_bindings()
        self._style = self._build_style()
        self._app: Application[None] = Application(
            layout=Layout(self._build_root()),
            key_bindings=self._kb,
            full_screen=True,
            mouse_support=False,
            style=self._style,
            before_render=self._refresh_plan,
        )

    @property
    def settings(self) -> TuiSettings:
        return self._settings

    @property
    def navigation(self) -> NavigationState:
        return self._nav

    @property
    def pipeline(self) -> LogIngestionPipeline:
        return self._pipeline

    @property
    def plan(self) -> RenderPlan:
        return self._plan

    def run(self) -> None:
        asyncio.run(self._run_async())

    async def _run_async(self) -> None:
        configure_logging(enable_console=False)
        refresh = max(50, int(self._settings.refresh_ms)) / 1000.0
        self._spawn(self._pipeline.start())
        ui_task = asyncio.create_task(self._ticker(refresh))
        try:
            await self._app.run_async()
        finally:
            ui_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await ui_task
            for task in list(self._tasks):
                task.cancel()
            await asyncio.gather(*self._tasks, return_exceptions=True)
            await self._pipeline.shutdown(stop_source=bool(self._settings.stop_on_exit))

    async def _ticker(self, refresh_seconds: float) -> None:
        while True:
            await asyncio.sleep(refresh_seconds)
            self._app.invalidate()

    def dispatch(self, key: Key) -> None:
        """Feed one key to the navigation state and run its command."""
        command = self._nav.handle(key)
        if command is Command.QUIT:
            if self._app.is_running and not self._app.is_done:
                self._app.exit()
            return
        if command is not None:
            self._commands[command]()
        self._app.invalidate()

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background task failed: {exc!r}")

    def _invalidate(self) -> None:
        self._app.invalidate()

    def _build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()
        for key, names in KEY_NAMES.items():
            for name in names:
                kb.add(name, eager=True)(self._key_handler(key))
        return kb

    def _key_handler(self, key: Key) -> Callable[[Any], None]:
        def _(event) -> None:
            self.dispatch(key)

        return _

    def _build_style(self) -> Style:
        return Style.from_dict(
            {
                "header": "bold fg:ansicyan",
                "footer": "fg:ansibrightblack",
                "row.selected": "bold fg:ansicyan",
                "title.focused": "bold fg:ansicyan",
                "title.active": "bold",
                "log.line": "",
            }
        )

    def _build_root(self) -> FloatContainer:
        header = Window(height=1, content=FormattedTextControl(self._render_header), style="class:header")
        footer = Window(height=1, content=FormattedTextControl(self._render_footer), style="class:footer")

        category_frames = [
            Frame(
                Window(content=FormattedTextControl(partial(self._render_category, i))),
                title=partial(self._render_category_title, i),
            )
            for i in range(self._catalog.category_count)
        ]
        right = Frame(
            Window(content=FormattedTextControl(self._render_right), wrap_lines=False),
            title=self._render_right_title,
        )
        body = VSplit(
            [
                HSplit(category_frames, width=Dimension(weight=1)),
                HSplit([right], width=Dimension(weight=2)),
            ]
        )
        overlay = ConditionalContainer(
            Frame(
                Window(content=FormattedTextControl(self._render_overlay)),
                title="Welcome!",
                width=60,
            ),
            filter=Condition(lambda: self._nav.overlay_visible),
        )
        return FloatContainer(
            content=HSplit([header, body, footer]),
            floats=[Float(content=overlay)],
        )

    def _refresh_plan(self, app: Application[None]) -> None:
        rows = app.output.get_size().rows
        content_height = max(1, rows - _CHROME_ROWS)
        list_height = max(1, (rows - 2) // self._catalog.category_count - 2)
        self._pipeline.resize(content_height)
        window = self._pipeline.window() if self._nav.log_visible else None
        self._plan = build_render_plan(
            self._nav,
            self._catalog,
            window,
            list_height=list_height,
            content_height=content_height,
        )

    def _render_header(self) -> Fragments:
        now = datetime.now().strftime("%H:%M:%S")
        status = self._pipeline.status.value
        return [("", f" Azurite Storage Explorer  {now}  logs={status} ")]

    def _render_footer(self) -> Fragments:
        text = (
            " q quit, h l switch, j k move, enter open, esc back,"
            f" L logs, r reattach  {self._plan.status} "
        )
        return [("", text)]

    def _render_rows(self, panel: Panel) -> Fragments:
        lines: Fragments = []
        for row in panel.rows:
            style = "class:row.selected" if row.selected else ""
            lines.append((style, f"{row.text}\n"))
        return lines

    def _render_title(self, panel: Panel) -> Fragments:
        if panel.focused:
            return [("class:title.focused", panel.title)]
        if panel.active:
            return [("class:title.active", panel.title)]
        return [("", panel.title)]

    def _render_category(self, index: int) -> Fragments:
        return self._render_rows(self._plan.categories[index])

    def _render_category_title(self, index: int) -> Fragments:
        return self._render_title(self._plan.categories[index])

    def _render_right(self) -> Fragments:
        return self._render_rows(self._plan.right)

    def _render_right_title(self) -> Fragments:
        return self._render_title(self._plan.right)

    def _render_overlay(self) -> Fragments:
        return [("", "\n".join(self._plan.overlay or ()))]


def run_tui(settings: Optional[TuiSettings] = None) -> None:
    StorageExplorerTui(settings).run()
