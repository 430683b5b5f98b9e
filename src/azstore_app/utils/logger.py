#!src/azstore_app/utils/logger.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler


class LoggingSettings(BaseSettings):
    """Logging configuration, isolated from the rest of the environment.

    Reads `.env` and the process environment, ignoring unrelated keys.

    Attributes:
        log_dir: Directory for log files.
        console_level: Level of the console handler.
        file_level: Level of the file handler.
        file_name: Log file name.
        max_bytes: Size at which the file is rotated.
        backup_count: Rotated files to keep.
        rich_tracebacks: Render tracebacks with rich on the console.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_prefix="AZSTORE_",
    )

    log_dir: Path = Field(default=Path("data/logs"), validation_alias="AZSTORE_LOG_DIR")
    console_level: str = Field(default="INFO", validation_alias="AZSTORE_CONSOLE_LEVEL")
    file_level: str = Field(default="DEBUG", validation_alias="AZSTORE_FILE_LEVEL")
    file_name: str = Field(default="azstorecli.log", validation_alias="AZSTORE_LOG_FILE")
    max_bytes: int = Field(default=5_000_000, validation_alias="AZSTORE_LOG_MAX_BYTES")
    backup_count: int = Field(default=5, validation_alias="AZSTORE_LOG_BACKUP_COUNT")
    rich_tracebacks: bool = Field(
        default=True, validation_alias="AZSTORE_RICH_TRACEBACKS"
    )


@dataclass(slots=True)
class _Runtime:
    configured: bool = False
    console: bool = False


_runtime: _Runtime = _Runtime()


def configure_logging(
    *, settings: Optional[LoggingSettings] = None, enable_console: bool = True
) -> None:
    """Configure global logging once, with a rich console and a rotating file.

    A later call with ``enable_console=False`` removes the console handler, which
    the full screen TUI needs before it takes over the terminal.

    Args:
        settings: Optional override, mostly for tests.
        enable_console: Attach the rich console handler.
    """
    root = logging.getLogger()
    if _runtime.configured:
        if _runtime.console and not enable_console:
            for h in list(root.handlers):
                if isinstance(h, RichHandler):
                    root.removeHandler(h)
            _runtime.console = False
        return

    s = settings or LoggingSettings()
    s.log_dir.mkdir(parents=True, exist_ok=True)

    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    file_level = getattr(logging, s.file_level.upper(), logging.DEBUG)
    file_handler = RotatingFileHandler(
        filename=str(s.log_dir / s.file_name),
        maxBytes=int(s.max_bytes),
        backupCount=int(s.backup_count),
        encoding="utf_8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )
    root.addHandler(file_handler)

    if enable_console:
        console_level = getattr(logging, s.console_level.upper(), logging.INFO)
        console_handler = RichHandler(
            rich_tracebacks=bool(s.rich_tracebacks),
            markup=True,
            show_path=False,
            show_level=True,
            log_time_format="[%X]",
        )
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(console_handler)

    for noisy in ("asyncio",):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    _runtime.configured = True
    _runtime.console = enable_console


def get_logger(name: str = "azstore_app", level: str | None = None) -> logging.Logger:
    """Return a logger, configuring global logging on first use.

    Args:
        name: Logger name.
        level: Optional level override.

    Returns:
        Configured logger.
    """
    configure_logging()
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
