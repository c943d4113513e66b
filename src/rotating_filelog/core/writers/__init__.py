"""Log writers (destinations records are routed to)."""

from __future__ import annotations

from .base import LogWriter, QueuedWriter, WriterOptions
from .console import ConsoleWriter
from .file import FileWriter

__all__ = [
    "ConsoleWriter",
    "FileWriter",
    "LogWriter",
    "QueuedWriter",
    "WriterOptions",
]
