"""Ready-made destination setups."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any

from .dispatcher import Logger
from .errors import CannotOpenError
from .formatter import XML_HEADER, XML_RECORD_FORMAT, XML_TRAILER
from .models import Filter, Level, now
from .writers import WriterOptions

# (file infix, threshold) for the standard trio of per-application logs.
DEFAULT_STREAMS: tuple[tuple[str, Level], ...] = (
    ("sys", Level.INFO),
    ("run", Level.FINEST),
    ("err", Level.ERROR),
)


def xml_options(**overrides: Any) -> WriterOptions:
    """Options that write each record as an XML element inside one <log> document."""
    base = WriterOptions(format=XML_RECORD_FORMAT, header=XML_HEADER, trailer=XML_TRAILER)
    return replace(base, **overrides)


async def init_default_destinations(
    logger: Logger,
    name: str = "test",
    directory: str | Path = "",
    *,
    to_file: bool = True,
    clock: Callable[[], datetime] = now,
) -> dict[str, Filter]:
    """Register ``<name>.sys|run|err.<yyyy-mm-dd>.log`` under ``directory``.

    ``sys`` takes INFO and above, ``run`` everything, ``err`` ERROR and above;
    all three rotate daily. With ``to_file=False`` a single console
    destination accepting every level is registered instead.
    """
    if not to_file:
        filt = await logger.create_destination(name, {"type": "console", "level": Level.FINEST})
        return {name: filt}

    out_dir = Path(directory)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CannotOpenError(f"Cannot create log directory {out_dir}: {exc}") from exc

    day = clock().date().isoformat()
    created: dict[str, Filter] = {}
    for infix, threshold in DEFAULT_STREAMS:
        path = out_dir / f"{name}.{infix}.{day}.log"
        filt = await logger.create_destination(
            str(path),
            {
                "filename": str(path),
                "level": threshold,
                "maxlines": "100M",
                "maxsize": 10_000_000_000,
                "daily": True,
            },
        )
        created[str(path)] = filt
    return created
