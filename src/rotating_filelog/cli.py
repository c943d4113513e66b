"""Command line: append stdin lines to a rotating log file.

    some-command | rotating-filelog app.log --maxlines 10K --daily
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from typing import Any, TextIO

from aiofiles.threadpool import wrap

from rotating_filelog.core.dispatcher import Logger
from rotating_filelog.core.errors import CannotOpenError, ConfigurationError
from rotating_filelog.core.formatter import DEFAULT_FORMAT
from rotating_filelog.core.models import Level

LOGGER = logging.getLogger(__name__)

_LEVEL_NAMES = ", ".join(m.name for m in Level)


def _configure_logging() -> None:
    """Library diagnostics go to stderr; stdout stays free for console destinations."""
    level_name = os.getenv("ROTATING_FILELOG_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_level(s: str) -> Level:
    try:
        return Level.parse(s)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(f"Invalid level. Allowed: {_LEVEL_NAMES}") from e


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Write stdin lines to a level-filtered rotating log file.")
    p.add_argument("log_path")
    p.add_argument("--level", type=_parse_level, default=Level.INFO, help="Level of each line (default: INFO)")
    p.add_argument(
        "--threshold",
        type=_parse_level,
        default=Level.FINEST,
        help="Minimum level written to the file (default: FINEST)",
    )
    p.add_argument("--source", default="stdin", help="Source recorded with each line")
    p.add_argument("--format", default=DEFAULT_FORMAT, help=f"Line template (default: {DEFAULT_FORMAT!r})")
    p.add_argument("--header", default="", help="Template written whenever a file is opened")
    p.add_argument("--trailer", default="", help="Template written whenever a file is closed")
    p.add_argument("--maxlines", default="0", help="Rotate after N lines; K/M/G = x1000 (0 disables)")
    p.add_argument("--maxsize", default="0", help="Rotate after N bytes; K/M/G = x1024 (0 disables)")
    p.add_argument("--daily", action="store_true", help="Rotate when the calendar day changes")
    p.add_argument("--no-rotate", dest="rotate", action="store_false", help="Truncate instead of keeping backups")
    p.add_argument("--buffer-length", type=int, default=None, help="Queue capacity (default: env or 32)")
    return p


def _destination_config(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "filename": args.log_path,
        "level": args.threshold,
        "format": args.format,
        "header": args.header,
        "trailer": args.trailer,
        "maxlines": args.maxlines,
        "maxsize": args.maxsize,
        "daily": args.daily,
        "rotate": args.rotate,
        "buffer_length": args.buffer_length,
    }


async def _pipe(args: argparse.Namespace, stream: TextIO) -> int:
    count = 0
    async with Logger() as log:
        await log.create_destination(args.log_path, _destination_config(args))
        async for line in wrap(stream):
            await log.log(args.level, args.source, line.rstrip("\r\n"))
            count += 1
    return count


def main(argv: Sequence[str] | None = None, *, stdin: TextIO | None = None) -> None:
    _configure_logging()
    args = build_parser().parse_args(argv)
    try:
        count = asyncio.run(_pipe(args, stdin if stdin is not None else sys.stdin))
    except (ConfigurationError, CannotOpenError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)
    LOGGER.debug("Wrote %d lines to %s", count, args.log_path)


if __name__ == "__main__":
    main()
