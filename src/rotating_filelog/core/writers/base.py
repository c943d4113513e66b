"""Writer interface, writer options and the queue/consumer machinery writers share."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from dataclasses import dataclass, field
from typing import Protocol

from ..errors import WriteError, WriterClosedError
from ..formatter import DEFAULT_FORMAT
from ..models import LogRecord

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_LENGTH = 32
BUFFER_LENGTH_ENV = "ROTATING_FILELOG_BUFFER_LENGTH"

_STOP = object()
_WAKE = object()


def _buffer_length_from_env() -> int:
    raw = os.getenv(BUFFER_LENGTH_ENV)
    if not raw:
        return DEFAULT_BUFFER_LENGTH
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{BUFFER_LENGTH_ENV} must be an integer, got {raw!r}") from exc


class LogWriter(Protocol):
    """Destination that consumes records on its own task."""

    async def submit(self, record: LogRecord) -> None:
        """Queue a record; waits only while the queue is full."""
        ...

    def rotate_now(self) -> None:
        """Request a rotation before the next queued record."""
        ...

    async def close(self) -> None:
        """Drain queued records, then release the destination. Idempotent."""
        ...


@dataclass(frozen=True, slots=True)
class WriterOptions:
    """Writer parameters, consumed once when the writer is opened."""

    format: str = DEFAULT_FORMAT
    header: str = ""
    trailer: str = ""
    max_lines: int = 0  # 0 disables line-count rotation
    max_bytes: int = 0  # 0 disables size rotation
    daily: bool = False
    keep_backups: bool = True
    # Queue capacity; defaults to ROTATING_FILELOG_BUFFER_LENGTH, else 32.
    buffer_length: int = field(default_factory=_buffer_length_from_env)

    def __post_init__(self) -> None:
        if self.max_lines < 0:
            raise ValueError("max_lines must be >= 0")
        if self.max_bytes < 0:
            raise ValueError("max_bytes must be >= 0")
        if self.buffer_length < 1:
            raise ValueError(f"buffer_length must be >= 1 (from argument or {BUFFER_LENGTH_ENV})")


class QueuedWriter:
    """Bounded queue drained by a single consumer task.

    Producers only ever put immutable records on the queue. Everything the
    subclass keeps about its output is touched from the consumer task alone,
    through the ``_on_*`` hooks. Backpressure is blocking: ``submit`` waits
    while the queue is full.
    """

    def __init__(self, *, name: str, buffer_length: int) -> None:
        self.name = name
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=buffer_length)
        self._task: asyncio.Task[None] | None = None
        self._closing = False
        self._failed = False
        self._rotate_requested = False
        self._in_flight = 0
        self._producers_idle = asyncio.Event()
        self._producers_idle.set()

    @property
    def closed(self) -> bool:
        return self._closing and (self._task is None or self._task.done())

    @property
    def failed(self) -> bool:
        return self._failed

    def _start(self) -> None:
        self._task = asyncio.create_task(self._run(), name=f"writer:{self.name}")

    async def submit(self, record: LogRecord) -> None:
        if self._closing:
            raise WriterClosedError(f"{self.name}: writer is closed")
        if self._failed:
            return  # already reported when the consumer failed
        self._in_flight += 1
        self._producers_idle.clear()
        try:
            await self._queue.put(record)
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._producers_idle.set()

    def rotate_now(self) -> None:
        if self._closing or self._failed:
            return
        self._rotate_requested = True
        # A full queue means the consumer is busy and will see the flag anyway.
        with contextlib.suppress(asyncio.QueueFull):
            self._queue.put_nowait(_WAKE)

    async def close(self) -> None:
        if not self._closing:
            self._closing = True
            if self._task is not None and not self._task.done():
                # Producers admitted before close() must land ahead of the stop marker.
                await self._producers_idle.wait()
                await self._queue.put(_STOP)
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        try:
            while True:
                item = await self._queue.get()
                if self._failed:
                    # Keep draining so blocked producers are released.
                    if item is _STOP:
                        break
                    continue
                try:
                    if self._rotate_requested:
                        self._rotate_requested = False
                        await self._on_rotate_request()
                    if item is _STOP:
                        break
                    if item is not _WAKE:
                        await self._on_record(item)  # type: ignore[arg-type]
                except OSError as exc:
                    await self._fail(exc)
                except Exception as exc:
                    # Unexpected errors in a hook are fatal to this writer as well.
                    await self._fail(WriteError(f"{self.name}: {type(exc).__name__}: {exc}"), cause=exc)
        finally:
            await self._on_close()

    async def _fail(self, exc: OSError, *, cause: BaseException | None = None) -> None:
        self._failed = True
        logger.error(
            "%s: %s; writer stopped, further records are discarded",
            self.name,
            exc,
            exc_info=cause,
        )
        await self._on_fail()

    async def _on_record(self, record: LogRecord) -> None:
        raise NotImplementedError

    async def _on_rotate_request(self) -> None:
        return None

    async def _on_fail(self) -> None:
        return None

    async def _on_close(self) -> None:
        return None
