from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from rotating_filelog.core.models import Level, LogRecord

START = datetime(2025, 12, 30, 10, 0, 0, tzinfo=timezone(timedelta(hours=2)))


class FakeClock:
    """Settable clock handed to writers and loggers."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(START)


@pytest.fixture
def make_record(clock: FakeClock) -> Callable[..., LogRecord]:
    def _make(
        message: str,
        *,
        level: Level = Level.INFO,
        at: datetime | None = None,
        source: str = "tests",
    ) -> LogRecord:
        return LogRecord(level=level, created_at=at or clock(), source=source, message=message)

    return _make


@pytest.fixture
def read_lines() -> Callable[[Path], list[str]]:
    def _read(path: Path) -> list[str]:
        return path.read_text(encoding="utf-8").splitlines()

    return _read


@pytest.fixture
def eventually() -> Callable[[Callable[[], bool]], Awaitable[None]]:
    async def _wait(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(0.01)

    return _wait
