"""Line templates.

A template is literal text with single-letter placeholders::

    %D  date (YYYY/MM/DD)      %d  short date (DD/MM/YY)
    %T  time (HH:MM:SS)        %t  short time (HH:MM)
    %L  level name             %S  source
    %s  short source           %M  message

Anything else, including unknown placeholders, is copied through unchanged.
"""

from __future__ import annotations

import re

from .models import LogRecord

DEFAULT_FORMAT = "[%D %T] [%L] (%S) %M"
SHORT_FORMAT = "[%t %d] [%L] %M"
ABBREV_FORMAT = "[%L] %M"

XML_RECORD_FORMAT = (
    '\t<record level="%L">\n'
    "\t\t<timestamp>%D %T</timestamp>\n"
    "\t\t<source>%S</source>\n"
    "\t\t<message>%M</message>\n"
    "\t</record>"
)
XML_HEADER = '<log created="%D %T">'
XML_TRAILER = "</log>"

_PLACEHOLDER_RE = re.compile(r"%([DdTtLSsM])")


def _expand(code: str, record: LogRecord) -> str:
    ts = record.created_at
    if code == "D":
        return f"{ts.year:04d}/{ts.month:02d}/{ts.day:02d}"
    if code == "d":
        return f"{ts.day:02d}/{ts.month:02d}/{ts.year % 100:02d}"
    if code == "T":
        return f"{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}"
    if code == "t":
        return f"{ts.hour:02d}:{ts.minute:02d}"
    if code == "L":
        return record.level.name if record.level is not None else ""
    if code == "S":
        return record.source
    if code == "s":
        return record.source.rsplit("/", 1)[-1]
    return record.message


def format_record(template: str, record: LogRecord) -> str:
    """Render one record as a newline-terminated line (empty template -> empty string)."""
    if not template:
        return ""
    return _PLACEHOLDER_RE.sub(lambda m: _expand(m.group(1), record), template) + "\n"
