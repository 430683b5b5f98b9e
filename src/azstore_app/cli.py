#!filepath: src/azstore_app/cli.py
from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich import print

from azstore_app.storage.azurite import AzuriteLogSource
from azstore_app.utils.logger import get_logger

app = typer.Typer(help="Explore a local Azurite storage emulator from the terminal.")
logger = get_logger(__name__)


@app.command()
def tui(
    max_lines: Optional[int] = typer.Option(
        None, "--max-lines", min=1, help="Scrollback capacity of the log panel."
    ),
    keep_running: bool = typer.Option(
        False, "--keep-running", help="Leave the emulator running on exit."
    ),
) -> None:
    """Open the full screen explorer and tail the emulator logs."""
    from azstore_app.tui import run_tui
    from azstore_app.tui.settings import TuiSettings

    overrides = {}
    if max_lines is not None:
        overrides["max_log_lines"] = max_lines
    if keep_running:
        overrides["stop_on_exit"] = False
    settings = TuiSettings().model_copy(update=overrides)

    try:
        run_tui(settings)
    except Exception as e:
        logger.error(f"Failed to run TUI: {e}")
        raise typer.Exit(code=2) from e


@app.command()
def stop() -> None:
    """Stop the emulator container if it exists."""
    source = AzuriteLogSource()

    async def _stop() -> tuple[str, bool]:
        cid = await source.current_handle_id()
        if not cid:
            return cid, False
        return cid, await source.stop_container(cid)

    cid, stopped = asyncio.run(_stop())
    if not cid:
        print(f"[yellow]No container named {source.settings.container_name}[/yellow]")
        raise typer.Exit(code=1)
    if not stopped:
        print(f"[red]Could not stop[/red] {cid}")
        raise typer.Exit(code=2)
    print(f"[bold green]Stopped[/bold green] {cid}")
