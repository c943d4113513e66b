from __future__ import annotations

from datetime import datetime

from rotating_filelog.core.formatter import (
    DEFAULT_FORMAT,
    XML_HEADER,
    XML_RECORD_FORMAT,
    format_record,
)
from rotating_filelog.core.models import Level, LogRecord

REC = LogRecord(
    level=Level.WARNING,
    created_at=datetime(2025, 12, 30, 8, 12, 4),
    source="pkg/module.go:42",
    message="disk almost full",
)


def test_default_format() -> None:
    line = format_record(DEFAULT_FORMAT, REC)
    assert line == "[2025/12/30 08:12:04] [WARNING] (pkg/module.go:42) disk almost full\n"


def test_short_codes() -> None:
    assert format_record("%d %t %s", REC) == "30/12/25 08:12 module.go:42\n"


def test_unknown_placeholders_pass_through() -> None:
    assert format_record("%X %M 100%", REC) == "%X disk almost full 100%\n"


def test_message_is_not_reexpanded() -> None:
    rec = LogRecord(level=Level.INFO, created_at=REC.created_at, source="", message="50%M off")
    assert format_record("%M", rec) == "50%M off\n"


def test_empty_template_renders_nothing() -> None:
    assert format_record("", REC) == ""


def test_synthetic_record_has_empty_fields() -> None:
    rec = LogRecord.synthetic(datetime(2025, 12, 30, 8, 0, 0))
    assert format_record("[%L|%S|%M] %D", rec) == "[||] 2025/12/30\n"
    assert format_record(XML_HEADER, rec) == '<log created="2025/12/30 08:00:00">\n'


def test_xml_record_format() -> None:
    out = format_record(XML_RECORD_FORMAT, REC)
    assert '<record level="WARNING">' in out
    assert "<message>disk almost full</message>" in out
    assert out.endswith("</record>\n")
