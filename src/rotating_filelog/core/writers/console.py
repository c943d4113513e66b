"""Console destination: same queue discipline as files, no rotation."""

from __future__ import annotations

import sys
from typing import Any, TextIO

from aiofiles.threadpool import wrap

from ..formatter import format_record
from ..models import LogRecord
from .base import QueuedWriter, WriterOptions


class ConsoleWriter(QueuedWriter):
    """Writes formatted records to a text stream (stdout unless given).

    ``stream`` must be a real text file object (``io.TextIOWrapper`` or a
    subclass); writes go through the aiofiles thread pool.
    """

    def __init__(self, options: WriterOptions | None = None, *, stream: TextIO | None = None) -> None:
        options = options or WriterOptions()
        super().__init__(
            name="ConsoleWriter",
            buffer_length=options.buffer_length,
        )
        self._format = options.format
        self._stream = stream
        self._out: Any = None

    @classmethod
    async def open(
        cls, options: WriterOptions | None = None, *, stream: TextIO | None = None
    ) -> ConsoleWriter:
        writer = cls(options, stream=stream)
        writer._start()
        return writer

    def _async_out(self) -> Any:
        # Resolved on first use so a replaced sys.stdout (pytest capsys) is honoured.
        if self._out is None:
            self._out = wrap(self._stream if self._stream is not None else sys.stdout)
        return self._out

    async def _on_record(self, record: LogRecord) -> None:
        out = self._async_out()
        await out.write(format_record(self._format, record))
        await out.flush()

    async def _on_close(self) -> None:
        if self._out is not None:
            await self._out.flush()
