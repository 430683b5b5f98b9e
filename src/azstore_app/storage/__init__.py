from __future__ import annotations

from azstore_app.storage.azurite import AzuriteLogSource, ProcessLogStream
from azstore_app.storage.base import LogSource, LogStream
from azstore_app.storage.errors import (
    ErrorKind,
    LogSourceError,
    ReattachError,
    SourceStartError,
)

__all__ = [
    "AzuriteLogSource",
    "ProcessLogStream",
    "LogSource",
    "LogStream",
    "ErrorKind",
    "LogSourceError",
    "ReattachError",
    "SourceStartError",
]
