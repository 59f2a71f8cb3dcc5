"""Trace decoding boundary: JFR recordings to typed event groups."""

import json
import subprocess
from collections.abc import Iterable
from datetime import timedelta
from pathlib import Path
from typing import Any, Protocol

from ..errors import TraceDecodeError
from ..logging_config import get_logger
from ..models import Attribute, EventGroup, EventRecord, EventType, TimeField, ValueKind
from .conversion import (
    looks_like_datetime,
    looks_like_duration,
    parse_datetime,
    parse_duration,
)

logger = get_logger(__name__)

START_TIME = TimeField.START_TIME.value
END_TIME = TimeField.END_TIME.value
DURATION = "duration"


class ITraceLoader(Protocol):
    """Decode a recording into one group of records per event type."""

    def load(self, path: Path) -> Iterable[EventGroup]:
        """Load and decode the recording at path."""
        ...


class JfrJsonLoader:
    """Decodes recordings through the JSON form of `jfr print`.

    Files ending in .json are taken to be already printed; anything else is
    handed to the JDK `jfr` tool.
    """

    def __init__(self, jfr_binary: str = "jfr"):
        self._jfr_binary = jfr_binary

    def load(self, path: Path) -> list[EventGroup]:
        """Load and decode the recording at path."""
        path = Path(path)
        document = self._read_document(path)
        groups = decode_recording(document)
        logger.info(
            "Decoded %s: %d event types, %d events",
            path.name,
            len(groups),
            sum(len(g.records) for g in groups),
        )
        return groups

    def _read_document(self, path: Path) -> Any:
        if path.suffix.lower() == ".json":
            try:
                return json.loads(path.read_text(encoding="utf-8"))
            except OSError as e:
                raise TraceDecodeError(f"cannot read {path}: {e}") from e
            except json.JSONDecodeError as e:
                raise TraceDecodeError(f"{path} is not valid JSON: {e}") from e

        command = [self._jfr_binary, "print", "--json", str(path)]
        logger.debug("Running %s", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise TraceDecodeError(
                f"jfr tool not found ({self._jfr_binary}); set JFR_BINARY or pass a .json recording"
            ) from e

        if completed.returncode != 0:
            raise TraceDecodeError(
                f"jfr print failed with exit code {completed.returncode}: {completed.stderr.strip()}"
            )

        try:
            return json.loads(completed.stdout)
        except json.JSONDecodeError as e:
            raise TraceDecodeError(f"jfr print produced invalid JSON: {e}") from e


def decode_recording(document: Any) -> list[EventGroup]:
    """Turn a `jfr print --json` document into event groups, in first-seen type order."""
    try:
        events = document["recording"]["events"]
    except (KeyError, TypeError) as e:
        raise TraceDecodeError("document has no recording.events list") from e
    if not isinstance(events, list):
        raise TraceDecodeError("recording.events is not a list")

    values_by_type: dict[str, list[dict[str, Any]]] = {}
    for event in events:
        if not isinstance(event, dict) or "type" not in event:
            raise TraceDecodeError(f"malformed event: {event!r}")
        values = event.get("values") or {}
        values_by_type.setdefault(event["type"], []).append(dict(values))

    return [_decode_group(name, rows) for name, rows in values_by_type.items()]


def _decode_group(type_name: str, rows: list[dict[str, Any]]) -> EventGroup:
    identifiers: list[str] = []
    samples: dict[str, Any] = {}
    for row in rows:
        for key, value in row.items():
            if key not in samples:
                identifiers.append(key)
                samples[key] = value
            elif samples[key] is None:
                samples[key] = value

    attributes = [Attribute(key, _infer_kind(key, samples[key])) for key in identifiers]
    time_fields: dict[TimeField, str] = {}
    if START_TIME in samples:
        time_fields[TimeField.START_TIME] = START_TIME

    # Instant events end when they start
    synthesize_end = END_TIME not in samples and START_TIME in samples
    if synthesize_end:
        attributes.append(Attribute(END_TIME, ValueKind.TIMESTAMP))
    if END_TIME in samples or synthesize_end:
        time_fields[TimeField.END_TIME] = END_TIME

    event_type = EventType(
        identifier=type_name,
        attributes=tuple(attributes),
        time_fields=time_fields,
    )
    records = [
        EventRecord(event_type, _decode_values(event_type, row, synthesize_end))
        for row in rows
    ]
    return EventGroup(event_type=event_type, records=records)


def _decode_values(
    event_type: EventType, row: dict[str, Any], synthesize_end: bool
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for attribute in event_type.attributes:
        if attribute.identifier not in row:
            continue
        raw = row[attribute.identifier]
        values[attribute.identifier] = _decode_value(attribute.kind, raw)

    if synthesize_end:
        values[END_TIME] = _end_time(values.get(START_TIME), values.get(DURATION))
    return values


def _decode_value(kind: ValueKind, raw: Any) -> Any:
    # Unparseable values stay raw so that timestamp conversion fails on them later
    if not isinstance(raw, str):
        return raw
    try:
        if kind is ValueKind.TIMESTAMP:
            return parse_datetime(raw)
        if kind is ValueKind.DURATION:
            return parse_duration(raw)
    except ValueError:
        return raw
    return raw


def _end_time(start: Any, duration: Any) -> Any:
    if duration is None:
        return start
    # Numeric start times are epoch milliseconds
    numeric = isinstance(start, (int, float)) and not isinstance(start, bool)
    if numeric and isinstance(duration, timedelta):
        return start + duration // timedelta(milliseconds=1)
    try:
        return start + duration
    except (TypeError, OverflowError):
        return None


def _infer_kind(identifier: str, sample: Any) -> ValueKind:
    if identifier == START_TIME or identifier == END_TIME:
        return ValueKind.TIMESTAMP
    if identifier == DURATION:
        return ValueKind.DURATION
    if isinstance(sample, bool):
        return ValueKind.TEXT
    if isinstance(sample, (int, float)):
        return ValueKind.NUMBER
    if isinstance(sample, (dict, list)):
        return ValueKind.OBJECT
    if isinstance(sample, str):
        if looks_like_duration(sample):
            return ValueKind.DURATION
        if looks_like_datetime(sample):
            return ValueKind.TIMESTAMP
    return ValueKind.TEXT
