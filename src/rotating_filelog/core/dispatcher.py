"""Level-filtered dispatch of records to named destinations."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable, Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Any

from .config import DestinationConfig
from .errors import WriterClosedError
from .models import Filter, Level, LogRecord, now
from .writers import ConsoleWriter, FileWriter, LogWriter

logger = logging.getLogger(__name__)


def _caller_source(depth: int = 2) -> str:
    """``module.function:line`` of the frame ``depth`` levels above the caller."""
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return "<unknown>"
    try:
        module = frame.f_globals.get("__name__", "?")
        return f"{module}.{frame.f_code.co_name}:{frame.f_lineno}"
    finally:
        del frame


def _render(template: str, args: tuple[Any, ...]) -> str:
    """``template % args``; a template that does not fit its args is kept verbatim."""
    if not args:
        return template
    try:
        return template % args
    except (TypeError, ValueError) as exc:
        logger.error("Bad log template %r with args %r: %s", template, args, exc)
        return f"{template} {args!r}"


class Logger:
    """Routes each record to every destination whose threshold it meets.

    The table is replaced as a whole on every administrative change, so a
    ``log`` call that is suspended mid-dispatch keeps iterating the snapshot
    it started with.
    """

    def __init__(self, *, clock: Callable[[], datetime] = now) -> None:
        self._filters: Mapping[str, Filter] = MappingProxyType({})
        self._clock = clock
        self._closed = False

    @property
    def filters(self) -> Mapping[str, Filter]:
        return self._filters

    @property
    def closed(self) -> bool:
        return self._closed

    def add_filter(self, name: str, filt: Filter) -> None:
        """Register (or replace) a destination. Replacing does not close the old writer."""
        self._filters = MappingProxyType({**self._filters, name: filt})

    def remove_filter(self, name: str) -> Filter | None:
        """Unregister a destination and return it; the caller owns closing its writer."""
        if name not in self._filters:
            return None
        table = dict(self._filters)
        filt = table.pop(name)
        self._filters = MappingProxyType(table)
        return filt

    async def create_destination(
        self, name: str, config: Mapping[str, Any] | DestinationConfig
    ) -> Filter | None:
        """Validate ``config``, open its writer and register it under ``name``.

        Returns ``None`` (and creates nothing) when the config is disabled.
        Raises ``ConfigurationError`` or ``CannotOpenError``.
        """
        cfg = DestinationConfig.from_mapping(config)
        if not cfg.enabled:
            logger.debug("Destination %r is disabled; configuration checked only", name)
            return None

        options = cfg.writer_options()
        writer: LogWriter
        if cfg.type == "console":
            writer = await ConsoleWriter.open(options)
        else:
            writer = await FileWriter.open(cfg.filename, options, clock=self._clock)

        filt = Filter(threshold=cfg.level, writer=writer)
        self.add_filter(name, filt)
        return filt

    async def log(self, level: Level, source: str, template: str, *args: Any) -> None:
        """Build one record and submit it to every accepting destination. No-op after close."""
        if self._closed:
            return
        targets = [f for f in self._filters.values() if f.accepts(level)]
        if not targets:
            return
        message = _render(template, args)
        record = LogRecord(level=level, created_at=self._clock(), source=source, message=message)
        for filt in targets:
            if self._closed:
                return  # close_all() started while we were suspended
            try:
                await filt.writer.submit(record)
            except WriterClosedError as exc:
                logger.debug("Dropped record for a closed writer: %s", exc)

    async def _log_from_caller(self, level: Level, template: str, args: tuple[Any, ...]) -> None:
        await self.log(level, _caller_source(2), template, *args)

    async def finest(self, template: str, *args: Any) -> None:
        await self._log_from_caller(Level.FINEST, template, args)

    async def fine(self, template: str, *args: Any) -> None:
        await self._log_from_caller(Level.FINE, template, args)

    async def debug(self, template: str, *args: Any) -> None:
        await self._log_from_caller(Level.DEBUG, template, args)

    async def trace(self, template: str, *args: Any) -> None:
        await self._log_from_caller(Level.TRACE, template, args)

    async def info(self, template: str, *args: Any) -> None:
        await self._log_from_caller(Level.INFO, template, args)

    async def warning(self, template: str, *args: Any) -> None:
        await self._log_from_caller(Level.WARNING, template, args)

    async def error(self, template: str, *args: Any) -> None:
        await self._log_from_caller(Level.ERROR, template, args)

    async def critical(self, template: str, *args: Any) -> None:
        await self._log_from_caller(Level.CRITICAL, template, args)

    def rotate_all(self) -> None:
        for filt in self._filters.values():
            filt.writer.rotate_now()

    async def close_all(self) -> None:
        """Close every writer and clear the table. Later ``log`` calls do nothing."""
        self._closed = True
        filters, self._filters = self._filters, MappingProxyType({})
        results = await asyncio.gather(
            *(f.writer.close() for f in filters.values()), return_exceptions=True
        )
        for name, result in zip(filters, results, strict=True):
            if isinstance(result, Exception):
                logger.error("Closing destination %r failed: %s", name, result)

    async def __aenter__(self) -> Logger:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close_all()
