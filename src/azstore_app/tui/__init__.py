from __future__ import annotations

from azstore_app.tui.app import StorageExplorerTui, run_tui

__all__ = ["StorageExplorerTui", "run_tui"]
