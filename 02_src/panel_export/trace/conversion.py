"""Timestamp and duration conversion for decoded trace values."""

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any

from ..errors import ConversionError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Java's Duration.toString() form: PT1H2M3.5S, PT0.000063825S, PT0S
_DURATION_RE = re.compile(
    r"^PT(?:(?P<hours>-?\d+)H)?(?:(?P<minutes>-?\d+)M)?(?:(?P<seconds>-?\d+(?:\.\d+)?)S)?$"
)
_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def looks_like_datetime(text: str) -> bool:
    return bool(_DATETIME_RE.match(text))


def looks_like_duration(text: str) -> bool:
    return text != "PT" and bool(_DURATION_RE.match(text))


def parse_datetime(text: str) -> datetime:
    """Parse an ISO-8601 date-time; sub-microsecond digits are truncated."""
    normalized = _FRACTION_RE.sub(r"\1", text.strip())
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_duration(text: str) -> timedelta:
    """Parse a Java-style ISO-8601 duration (hours, minutes, seconds only)."""
    match = _DURATION_RE.match(text.strip())
    if not match or text.strip() == "PT":
        raise ValueError(f"not an ISO-8601 duration: {text!r}")
    hours = int(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    seconds = float(match.group("seconds") or 0)
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


def to_epoch_millis(value: Any) -> int:
    """
    Convert a decoded timestamp value to epoch milliseconds.

    Accepts datetimes (naive ones are taken as UTC), ISO-8601 strings and
    plain numbers, which are taken to already be epoch milliseconds.

    Raises:
        ConversionError: the value is missing or not representable.
    """
    if value is None:
        raise ConversionError("missing value")
    if isinstance(value, bool):
        raise ConversionError(f"not a timestamp: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ConversionError(f"not a finite timestamp: {value!r}")
        return int(value)
    if isinstance(value, str):
        try:
            value = parse_datetime(value)
        except ValueError as e:
            raise ConversionError(f"not an ISO-8601 date-time: {value!r}") from e
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        try:
            return (value - EPOCH) // timedelta(milliseconds=1)
        except OverflowError as e:
            raise ConversionError(f"timestamp out of range: {value!r}") from e
    raise ConversionError(f"unsupported timestamp type: {type(value).__name__}")
