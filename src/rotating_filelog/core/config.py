"""Destination configuration.

Turns an already-parsed mapping (from XML, TOML, CLI flags, ...) into validated
writer parameters. Reading configuration files is left to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .formatter import DEFAULT_FORMAT
from .models import Level
from .writers.base import WriterOptions

_SUFFIX_POWERS = {"K": 1, "M": 2, "G": 3}


def parse_num_suffix(text: str | int, multiplier: int) -> int:
    """Parse an integer with an optional K/M/G suffix.

    ``parse_num_suffix("10K", 1000) == 10_000``;
    ``parse_num_suffix("2M", 1024) == 2 * 1024 * 1024``.
    """
    if isinstance(text, int):
        return text
    s = text.strip()
    power = 0
    if len(s) > 1 and s[-1].upper() in _SUFFIX_POWERS:
        power = _SUFFIX_POWERS[s[-1].upper()]
        s = s[:-1]
    try:
        value = int(s)
    except ValueError as exc:
        raise ValueError(f"not an integer with optional K/M/G suffix: {text!r}") from exc
    return value * multiplier**power


class DestinationConfig(BaseModel):
    """Validated parameters for one named destination."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["file", "console"] = "file"
    level: Level
    filename: str | None = None
    format: str = DEFAULT_FORMAT
    header: str = ""
    trailer: str = ""
    maxlines: int = Field(default=0, ge=0)
    maxsize: int = Field(default=0, ge=0)
    daily: bool = False
    rotate: bool = True
    enabled: bool = True
    buffer_length: int | None = Field(default=None, ge=1)

    @field_validator("level", mode="before")
    @classmethod
    def _level(cls, v: Any) -> Level:
        if isinstance(v, str):
            try:
                return Level.parse(v)
            except ConfigurationError as exc:
                raise ValueError(str(exc)) from exc
        return v

    @field_validator("maxlines", mode="before")
    @classmethod
    def _maxlines(cls, v: Any) -> Any:
        return parse_num_suffix(v, 1000) if isinstance(v, str) else v

    @field_validator("maxsize", mode="before")
    @classmethod
    def _maxsize(cls, v: Any) -> Any:
        return parse_num_suffix(v, 1024) if isinstance(v, str) else v

    @field_validator("filename")
    @classmethod
    def _filename(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("filename must not be empty")
        return v

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | DestinationConfig) -> DestinationConfig:
        """Validate a raw mapping, reporting every failing field at once."""
        if isinstance(data, DestinationConfig):
            return data
        try:
            cfg = cls.model_validate(dict(data))
        except ValidationError as exc:
            fields = [".".join(str(p) for p in err["loc"]) or "<root>" for err in exc.errors()]
            details = "; ".join(
                f"{f}: {err['msg']}" for f, err in zip(fields, exc.errors(), strict=True)
            )
            raise ConfigurationError(f"Invalid destination config: {details}", fields=fields) from exc

        if cfg.type == "file" and cfg.filename is None:
            raise ConfigurationError(
                "Required property 'filename' for file destination missing", fields=("filename",)
            )
        return cfg

    def writer_options(self) -> WriterOptions:
        """Writer options; an unset ``buffer_length`` falls back to the environment."""
        params: dict[str, Any] = dict(
            format=self.format,
            header=self.header,
            trailer=self.trailer,
            max_lines=self.maxlines,
            max_bytes=self.maxsize,
            daily=self.daily,
            keep_backups=self.rotate,
        )
        if self.buffer_length is not None:
            params["buffer_length"] = self.buffer_length
        try:
            return WriterOptions(**params)
        except ValueError as exc:
            raise ConfigurationError(str(exc), fields=("buffer_length",)) from exc
