#!src/azstore_app/tui/settings.py
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TuiSettings(BaseSettings):
    """Settings for the terminal UI.

    Attributes:
        max_log_lines: Scrollback capacity of the log panel.
        queue_size: Lines in flight between the log reader and the buffer.
        refresh_ms: Redraw interval for the clock in the header.
        stop_on_exit: Stop the emulator container when the UI quits.
    """

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    max_log_lines: int = Field(default=500, ge=1, validation_alias="AZSTORE_TUI_MAX_LOG_LINES")
    queue_size: int = Field(default=200, ge=1, validation_alias="AZSTORE_TUI_QUEUE_SIZE")
    refresh_ms: int = Field(default=1000, validation_alias="AZSTORE_TUI_REFRESH_MS")
    stop_on_exit: bool = Field(default=True, validation_alias="AZSTORE_TUI_STOP_ON_EXIT")
