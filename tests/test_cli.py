from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from rotating_filelog.cli import build_parser, main
from rotating_filelog.core.models import Level


def _stdin(tmp_path: Path, text: str):
    src = tmp_path / "input.txt"
    src.write_text(text, encoding="utf-8")
    return src.open("r", encoding="utf-8")


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["app.log"])
    assert args.level is Level.INFO
    assert args.threshold is Level.FINEST
    assert args.rotate is True
    assert args.daily is False


def test_parser_rejects_unknown_level() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["app.log", "--level", "LOUD"])


def test_main_pipes_lines(tmp_path: Path) -> None:
    out = tmp_path / "app.log"
    with _stdin(tmp_path, "first\nsecond\n") as fh:
        main([str(out), "--format", "%L %s %M", "--source", "a/b/job"], stdin=fh)

    assert out.read_text(encoding="utf-8").splitlines() == ["INFO job first", "INFO job second"]


def test_main_rotates_by_lines(tmp_path: Path) -> None:
    out = tmp_path / "app.log"
    with _stdin(tmp_path, "a\nb\nc\n") as fh:
        main([str(out), "--format", "%M", "--maxlines", "2"], stdin=fh)

    rotated = tmp_path / f"app.{date.today().isoformat()}.000.log"
    assert out.read_text(encoding="utf-8").splitlines() == ["a", "b"]
    assert rotated.read_text(encoding="utf-8").splitlines() == ["c"]


def test_main_threshold_drops_lines(tmp_path: Path) -> None:
    out = tmp_path / "app.log"
    with _stdin(tmp_path, "quiet\n") as fh:
        main([str(out), "--level", "debug", "--threshold", "warning"], stdin=fh)

    assert out.read_text(encoding="utf-8") == ""


def test_main_bad_config_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with _stdin(tmp_path, "") as fh, pytest.raises(SystemExit) as info:
        main([str(tmp_path / "app.log"), "--maxlines", "lots"], stdin=fh)

    assert info.value.code == 2
    assert "maxlines" in capsys.readouterr().err


def test_main_missing_directory_exits_2(tmp_path: Path) -> None:
    with _stdin(tmp_path, "x\n") as fh, pytest.raises(SystemExit) as info:
        main([str(tmp_path / "nope" / "app.log")], stdin=fh)

    assert info.value.code == 2
