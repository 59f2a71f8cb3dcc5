"""Trace window computation."""

from collections.abc import Callable, Iterable
from typing import Protocol

from ..errors import ConversionError
from ..logging_config import get_logger
from ..models import Attribute, EventGroup, EventType, TimeField, TimeWindow
from ..trace import to_epoch_millis

logger = get_logger(__name__)


TimeFieldResolver = Callable[[EventType, TimeField], list[Attribute]]


def typed_time_fields(event_type: EventType, time_field: TimeField) -> list[Attribute]:
    """Resolve time attributes through the roles the decoder assigned."""
    attribute = event_type.time_attribute(time_field)
    return [attribute] if attribute is not None else []


def substring_time_fields(event_type: EventType, time_field: TimeField) -> list[Attribute]:
    """Every attribute whose identifier contains "startTime" / "endTime".

    Matches unrelated attributes such as "startTimeTicks" too.
    """
    return [a for a in event_type.attributes if time_field.value in a.identifier]


class ITraceWindowComputer(Protocol):
    """Derive the time interval covered by a decoded trace."""

    def compute(self, groups: Iterable[EventGroup]) -> TimeWindow:
        """Scan every record once and return the resulting window."""
        ...


class TraceWindowComputer:
    """Single-pass min(start) / max(end) scan over decoded event groups."""

    def __init__(self, resolver: TimeFieldResolver = typed_time_fields):
        self._resolver = resolver

    def compute(self, groups: Iterable[EventGroup]) -> TimeWindow:
        """Scan every record once and return the resulting window.

        Values that fail conversion are skipped. If nothing converts, the
        returned window is degenerate.
        """
        window = TimeWindow()
        skipped = 0

        for group in groups:
            if not group.has_records:
                continue

            starts = self._resolver(group.event_type, TimeField.START_TIME)
            ends = self._resolver(group.event_type, TimeField.END_TIME)
            if not starts and not ends:
                continue

            for record in group.records:
                for attribute in starts:
                    try:
                        window.include_start(to_epoch_millis(record.value(attribute)))
                    except ConversionError:
                        skipped += 1
                for attribute in ends:
                    try:
                        window.include_end(to_epoch_millis(record.value(attribute)))
                    except ConversionError:
                        skipped += 1

        if skipped:
            logger.debug("Skipped %d unconvertible timestamp values", skipped)
        if window.is_degenerate:
            logger.warning("No valid start/end timestamps found in trace")
        else:
            logger.info("Trace window [%d, %d]", window.start_ms, window.end_ms)
        return window
