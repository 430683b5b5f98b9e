#!src/azstore_app/storage/errors.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    UNKNOWN = "unknown"
    SOURCE_START = "source_start"
    REATTACH = "reattach"


@dataclass(frozen=True, slots=True)
class LogSourceErrorDetails:
    kind: ErrorKind
    handle_id: Optional[str] = None
    command: Optional[str] = None
    exit_code: Optional[int] = None
    message: str = ""
    output: Optional[str] = None

    @property
    def reason(self) -> str:
        return str(self.kind.value)


class LogSourceError(Exception):
    default_kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, payload: str | LogSourceErrorDetails) -> None:
        if isinstance(payload, LogSourceErrorDetails):
            super().__init__(str(payload.message or payload.reason))
            self._details = payload
        else:
            super().__init__(str(payload or "log_source_error"))
            self._details = LogSourceErrorDetails(
                kind=self.default_kind, message=str(payload or "")
            )

    @property
    def details(self) -> LogSourceErrorDetails:
        return self._details

    @property
    def kind(self) -> ErrorKind:
        return self._details.kind

    @property
    def handle_id(self) -> Optional[str]:
        return self._details.handle_id


class SourceStartError(LogSourceError):
    """The log source could not be started."""

    default_kind = ErrorKind.SOURCE_START


class ReattachError(LogSourceError):
    """A fresh stream for the current handle could not be obtained."""

    default_kind = ErrorKind.REATTACH


__all__ = [
    "ErrorKind",
    "LogSourceErrorDetails",
    "LogSourceError",
    "SourceStartError",
    "ReattachError",
]
