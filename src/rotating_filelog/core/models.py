"""Core data models for records, levels and filters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .writers.base import LogWriter


class Level(IntEnum):
    """Totally ordered severity, used both on records and as a filter threshold."""

    FINEST = 0
    FINE = 1
    DEBUG = 2
    TRACE = 3
    INFO = 4
    WARNING = 5
    ERROR = 6
    CRITICAL = 7

    @classmethod
    def parse(cls, value: str | Level) -> Level:
        """Resolve a case-insensitive level name."""
        if isinstance(value, Level):
            return value
        name = str(value).strip().upper()
        try:
            return cls[name]
        except KeyError as exc:
            allowed = ", ".join(m.name for m in cls)
            raise ConfigurationError(
                f"Unknown level {value!r}. Allowed: {allowed}", fields=("level",)
            ) from exc


def now() -> datetime:
    """Local wall-clock time, timezone-aware."""
    return datetime.now().astimezone()


@dataclass(frozen=True, slots=True)
class LogRecord:
    """A single log event, immutable once created at the call site."""

    level: Level | None  # None only for header/trailer records
    created_at: datetime
    source: str
    message: str

    @classmethod
    def synthetic(cls, created_at: datetime) -> LogRecord:
        """Record used to render headers and trailers (only the time is meaningful)."""
        return cls(level=None, created_at=created_at, source="", message="")


@dataclass(frozen=True, slots=True)
class Filter:
    """A named destination's threshold and the writer records are routed to."""

    threshold: Level
    writer: LogWriter

    def accepts(self, level: Level) -> bool:
        return level >= self.threshold
