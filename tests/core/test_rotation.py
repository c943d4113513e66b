from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import pytest

from rotating_filelog.core.rotation import (
    RotationDecision,
    daily_name,
    decide_rotation,
    next_free_sequenced,
    sequenced_name,
)

OPENED = date(2025, 12, 30)
SAME_DAY = datetime(2025, 12, 30, 23, 59, 59)
NEXT_DAY = datetime(2025, 12, 31, 0, 0, 1)


def _decide(**overrides) -> RotationDecision:
    params = dict(
        line_count=0,
        byte_count=0,
        opened_on_day=OPENED,
        max_lines=0,
        max_bytes=0,
        daily=False,
        arrival=SAME_DAY,
    )
    params.update(overrides)
    return decide_rotation(**params)


def test_no_limits_never_rotates() -> None:
    assert _decide(line_count=10**9, byte_count=10**12, arrival=NEXT_DAY) is RotationDecision.NONE


def test_line_threshold() -> None:
    assert _decide(max_lines=2, line_count=1) is RotationDecision.NONE
    assert _decide(max_lines=2, line_count=2) is RotationDecision.THRESHOLD


def test_byte_threshold() -> None:
    assert _decide(max_bytes=100, byte_count=99) is RotationDecision.NONE
    assert _decide(max_bytes=100, byte_count=100) is RotationDecision.THRESHOLD


def test_day_change() -> None:
    assert _decide(daily=True, arrival=SAME_DAY) is RotationDecision.NONE
    assert _decide(daily=True, arrival=NEXT_DAY) is RotationDecision.DAY


def test_threshold_wins_over_day() -> None:
    decision = _decide(daily=True, max_lines=1, line_count=1, arrival=NEXT_DAY)
    assert decision is RotationDecision.THRESHOLD


def test_rotated_names() -> None:
    base = Path("logs/app.log")
    assert sequenced_name(base, OPENED, 7) == Path("logs/app.2025-12-30.007.log")
    assert daily_name(base, OPENED) == Path("logs/app.2025-12-30.log")


def test_rotated_names_replace_dated_stem() -> None:
    base = Path("logs/gw.sys.2025-12-29.log")
    assert daily_name(base, OPENED) == Path("logs/gw.sys.2025-12-30.log")
    assert sequenced_name(base, OPENED, 0) == Path("logs/gw.sys.2025-12-30.000.log")


def test_rotated_names_without_extension() -> None:
    assert sequenced_name(Path("app"), OPENED, 1) == Path("app.2025-12-30.001")


@pytest.mark.asyncio
async def test_next_free_sequenced_skips_taken_names() -> None:
    base = Path("app.log")
    taken = {sequenced_name(base, OPENED, 3), sequenced_name(base, OPENED, 4)}

    async def exists(p: Path) -> bool:
        return p in taken

    path, next_seq = await next_free_sequenced(base, OPENED, 3, exists=exists)
    assert path == sequenced_name(base, OPENED, 5)
    assert next_seq == 6


@pytest.mark.asyncio
async def test_next_free_sequenced_propagates_probe_errors() -> None:
    async def exists(p: Path) -> bool:
        raise PermissionError("denied")

    with pytest.raises(PermissionError):
        await next_free_sequenced(Path("app.log"), OPENED, 0, exists=exists)
