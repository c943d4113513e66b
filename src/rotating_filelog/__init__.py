"""Level-filtered log destinations with a rotating file writer."""

from __future__ import annotations

from .core.config import DestinationConfig, parse_num_suffix
from .core.defaults import init_default_destinations, xml_options
from .core.dispatcher import Logger
from .core.errors import (
    CannotOpenError,
    ConfigurationError,
    FileLogError,
    RotationError,
    WriteError,
    WriterClosedError,
)
from .core.formatter import DEFAULT_FORMAT, format_record
from .core.models import Filter, Level, LogRecord
from .core.rotation import RotationDecision, decide_rotation
from .core.writers import ConsoleWriter, FileWriter, LogWriter, WriterOptions

__all__ = [
    "DEFAULT_FORMAT",
    "CannotOpenError",
    "ConfigurationError",
    "ConsoleWriter",
    "DestinationConfig",
    "FileLogError",
    "FileWriter",
    "Filter",
    "Level",
    "LogRecord",
    "LogWriter",
    "Logger",
    "RotationDecision",
    "RotationError",
    "WriteError",
    "WriterClosedError",
    "WriterOptions",
    "decide_rotation",
    "format_record",
    "init_default_destinations",
    "parse_num_suffix",
    "xml_options",
]
