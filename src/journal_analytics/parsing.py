from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Union


@dataclass(frozen=True)
class Parsed:
    value: Any


@dataclass(frozen=True)
class Invalid:
    reason: str


ParseResult = Union[Parsed, Invalid]

_CLOCK_12H = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([ap]m)$", re.IGNORECASE)
_CLOCK_24H = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_DURATION = re.compile(r"^(\d+):(\d{2}):(\d{2})$")
_US_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


def parse_record_date(value: Any) -> ParseResult:
    if isinstance(value, datetime):
        return Parsed(value.date())
    if isinstance(value, date):
        return Parsed(value)
    if not isinstance(value, str):
        return Invalid(f"Unsupported date value: {value!r}")
    text = value.strip()
    if not text:
        return Invalid("Empty date")
    try:
        return Parsed(date.fromisoformat(text))
    except ValueError:
        pass
    try:
        return Parsed(datetime.fromisoformat(text.replace("Z", "+00:00")).date())
    except ValueError:
        pass
    match = _US_DATE.match(text)
    if match:
        month, day, year = (int(part) for part in match.groups())
        try:
            return Parsed(date(year, month, day))
        except ValueError:
            return Invalid(f"Invalid date: {value}")
    return Invalid(f"Invalid date: {value}")


def parse_clock_time(value: Any) -> ParseResult:
    """Parse ``h:mm:ss AM/PM`` or ``HH:mm:ss`` into fractional hours in [0, 24)."""
    if not isinstance(value, str) or not value.strip():
        return Invalid("Empty time")
    text = value.strip()

    match = _CLOCK_12H.match(text)
    if match:
        hour, minute, second = _clock_fields(match)
        if hour < 1 or hour > 12 or minute > 59 or second > 59:
            return Invalid(f"Invalid time: {value}")
        hour = hour % 12
        if match.group(4).lower() == "pm":
            hour += 12
        return Parsed(hour + minute / 60 + second / 3600)

    match = _CLOCK_24H.match(text)
    if match:
        hour, minute, second = _clock_fields(match)
        if hour > 23 or minute > 59 or second > 59:
            return Invalid(f"Invalid time: {value}")
        return Parsed(hour + minute / 60 + second / 3600)

    return Invalid(f"Invalid time: {value}")


def parse_duration(value: Any) -> ParseResult:
    """Parse ``H:MM:SS`` into total minutes."""
    if not isinstance(value, str) or not value.strip():
        return Invalid("Empty duration")
    match = _DURATION.match(value.strip())
    if not match:
        return Invalid(f"Invalid duration: {value}")
    hours, minutes, seconds = (int(part) for part in match.groups())
    if minutes > 59 or seconds > 59:
        return Invalid(f"Invalid duration: {value}")
    return Parsed(hours * 60 + minutes + seconds / 60)


def _clock_fields(match: re.Match[str]) -> tuple[int, int, int]:
    hour = int(match.group(1))
    minute = int(match.group(2))
    second = int(match.group(3)) if match.group(3) else 0
    return hour, minute, second
