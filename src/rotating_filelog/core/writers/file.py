"""Rotating file writer.

The consumer task is the sole owner of the open handle, the current filename
and the line/byte/day counters. Rotation is logical relabeling: the writer
moves on to a new name and leaves everything already written where it is.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import aiofiles
import aiofiles.os

from ..errors import CannotOpenError, RotationError, WriteError
from ..formatter import format_record
from ..models import LogRecord, now
from ..rotation import (
    RotationDecision,
    daily_name,
    decide_rotation,
    next_free_sequenced,
)
from .base import QueuedWriter, WriterOptions

logger = logging.getLogger(__name__)


async def _path_exists(path: Path) -> bool:
    """Existence probe that still raises on I/O errors other than 'not found'."""
    try:
        await aiofiles.os.stat(path)
    except FileNotFoundError:
        return False
    return True


class FileWriter(QueuedWriter):
    """Writes formatted records to a file, rotating by lines, bytes or day.

    Build one with :meth:`open`; the constructor does not touch the filesystem.
    """

    def __init__(
        self,
        path: str | Path,
        options: WriterOptions,
        *,
        clock: Callable[[], datetime] = now,
    ) -> None:
        base = Path(path)
        super().__init__(
            name=f"FileWriter({base})",
            buffer_length=options.buffer_length,
        )
        self._base = base
        self._options = options
        self._clock = clock

        self._filename = base
        self._file = None
        self._line_count = 0
        self._byte_count = 0
        self._opened_on_day = clock().date()
        self._backup_seq = 0

    @classmethod
    async def open(
        cls,
        path: str | Path,
        options: WriterOptions | None = None,
        *,
        clock: Callable[[], datetime] = now,
    ) -> FileWriter:
        """Open (append) the base file, write the header and start the consumer."""
        writer = cls(path, options or WriterOptions(), clock=clock)
        try:
            await writer._open_current(clock(), truncate=False)
        except OSError as exc:
            await writer._on_fail()
            raise CannotOpenError(f"Cannot open log file {writer._filename}: {exc}") from exc
        writer._start()
        logger.debug("Opened %s", writer._filename)
        return writer

    @property
    def filename(self) -> Path:
        """Path records are currently written to."""
        return self._filename

    @property
    def base_filename(self) -> Path:
        return self._base

    async def _emit(self, template: str) -> None:
        text = format_record(template, LogRecord.synthetic(self._clock()))
        if text:
            await self._file.write(text.encode("utf-8", "backslashreplace"))
            await self._file.flush()

    async def _open_current(self, day_of: datetime, *, truncate: bool) -> None:
        self._file = await aiofiles.open(self._filename, "wb" if truncate else "ab")
        self._line_count = 0
        self._byte_count = 0
        self._opened_on_day = day_of.date()
        await self._emit(self._options.header)

    async def _close_current(self, *, trailer: bool = True) -> None:
        if self._file is None:
            return
        f = self._file
        try:
            if trailer:
                await self._emit(self._options.trailer)
        finally:
            self._file = None
            await f.close()

    async def _choose_target(self, decision: RotationDecision, arrival: datetime) -> Path:
        day = arrival.date()
        if decision is RotationDecision.DAY:
            self._backup_seq = 0
            target = daily_name(self._base, day)
            if not await _path_exists(target):
                return target
        target, self._backup_seq = await next_free_sequenced(
            self._base, day, self._backup_seq, exists=_path_exists
        )
        return target

    async def _rotate(self, decision: RotationDecision, arrival: datetime) -> None:
        previous = self._filename
        try:
            await self._close_current()
            if self._options.keep_backups:
                self._filename = await self._choose_target(decision, arrival)
            await self._open_current(arrival, truncate=not self._options.keep_backups)
        except OSError as exc:
            raise RotationError(f"Rotation of {previous} failed: {exc}") from exc
        logger.info("%s: %s rotation %s -> %s", self.name, decision.value, previous, self._filename)

    async def _reopen_if_missing(self) -> None:
        try:
            if await _path_exists(self._filename):
                return
            logger.warning("%s: %s disappeared, reopening", self.name, self._filename)
            await self._close_current(trailer=False)
            await self._open_current(self._clock(), truncate=False)
        except OSError as exc:
            raise WriteError(f"Cannot reopen {self._filename}: {exc}") from exc

    async def _on_record(self, record: LogRecord) -> None:
        decision = decide_rotation(
            line_count=self._line_count,
            byte_count=self._byte_count,
            opened_on_day=self._opened_on_day,
            max_lines=self._options.max_lines,
            max_bytes=self._options.max_bytes,
            daily=self._options.daily,
            arrival=record.created_at,
        )
        if decision is not RotationDecision.NONE:
            await self._rotate(decision, record.created_at)

        await self._reopen_if_missing()

        data = format_record(self._options.format, record).encode("utf-8", "backslashreplace")
        try:
            await self._file.write(data)
            await self._file.flush()
        except OSError as exc:
            raise WriteError(f"Write to {self._filename} failed: {exc}") from exc

        self._line_count += 1
        self._byte_count += len(data)

    async def _on_rotate_request(self) -> None:
        await self._rotate(RotationDecision.THRESHOLD, self._clock())

    async def _on_fail(self) -> None:
        if self._file is None:
            return
        f, self._file = self._file, None
        try:
            await f.close()
        except OSError as exc:
            logger.debug("%s: close after failure: %s", self.name, exc)

    async def _on_close(self) -> None:
        try:
            await self._close_current()
        except OSError as exc:
            logger.error("%s: closing %s failed: %s", self.name, self._filename, exc)
