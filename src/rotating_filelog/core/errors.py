"""Exception taxonomy for destinations and writers."""

from __future__ import annotations

from collections.abc import Sequence


class FileLogError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(FileLogError, ValueError):
    """A destination could not be configured (missing/invalid field, unknown level or type)."""

    def __init__(self, message: str, *, fields: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.fields = tuple(fields)


class CannotOpenError(FileLogError, OSError):
    """The backing file could not be opened when the writer was constructed."""


class RotationError(FileLogError, OSError):
    """Choosing a rotated name or reopening after rotation failed."""


class WriteError(FileLogError, OSError):
    """Writing a record to the open handle failed."""


class WriterClosedError(FileLogError, RuntimeError):
    """A record was submitted to a writer after close()."""
