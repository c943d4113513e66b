"""Rotation decisions and rotated-file naming."""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from enum import Enum
from pathlib import Path

_DAY_SUFFIX_RE = re.compile(r"\.\d{4}-\d{2}-\d{2}$")


class RotationDecision(str, Enum):
    NONE = "none"
    THRESHOLD = "threshold"
    DAY = "day"


def decide_rotation(
    *,
    line_count: int,
    byte_count: int,
    opened_on_day: date,
    max_lines: int,
    max_bytes: int,
    daily: bool,
    arrival: datetime,
) -> RotationDecision:
    """Decide whether to rotate before writing a record that arrived at ``arrival``.

    Thresholds are checked first; when one fires the day check is skipped and
    re-evaluated on the next record against the freshly opened file.
    """
    if (max_lines > 0 and line_count >= max_lines) or (max_bytes > 0 and byte_count >= max_bytes):
        return RotationDecision.THRESHOLD
    if daily and arrival.date() != opened_on_day:
        return RotationDecision.DAY
    return RotationDecision.NONE


def _stem(base: Path) -> str:
    # A base like "app.sys.2025-12-30.log" rotates to "app.sys.<day>...", not "...2025-12-30.<day>...".
    return _DAY_SUFFIX_RE.sub("", base.stem)


def sequenced_name(base: Path, day: date, seq: int) -> Path:
    """``<stem>.<yyyy-mm-dd>.<NNN><ext>``"""
    return base.with_name(f"{_stem(base)}.{day.isoformat()}.{seq:03d}{base.suffix}")


def daily_name(base: Path, day: date) -> Path:
    """``<stem>.<yyyy-mm-dd><ext>``"""
    return base.with_name(f"{_stem(base)}.{day.isoformat()}{base.suffix}")


async def next_free_sequenced(
    base: Path,
    day: date,
    start: int,
    *,
    exists: Callable[[Path], Awaitable[bool]],
) -> tuple[Path, int]:
    """Probe sequenced names from ``start`` upward and return the first free one.

    Returns the chosen path and the sequence number to use for the next rotation.
    """
    seq = start
    while True:
        candidate = sequenced_name(base, day, seq)
        seq += 1
        if not await exists(candidate):
            return candidate, seq
