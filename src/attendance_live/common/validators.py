from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..core.enums import DisplayMode
from ..core.exceptions import ConfigurationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{field_name} must be a non-empty string")
    return value.strip()


def parse_group(value: Any) -> str:
    return require_non_empty(value, "group")


def parse_day(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = require_non_empty(value, "date")
    try:
        return parse_iso_date(text)
    except ValueError:
        raise ConfigurationError(f"date must be YYYY-MM-DD, got {text!r}") from None


def parse_mode(value: Any) -> DisplayMode:
    if isinstance(value, DisplayMode):
        return value
    text = require_non_empty(value, "mode").lower().replace("-", "_")
    try:
        return DisplayMode(text)
    except ValueError:
        allowed = ", ".join(m.value for m in DisplayMode)
        raise ConfigurationError(f"Unknown mode {value!r} (expected one of: {allowed})") from None
