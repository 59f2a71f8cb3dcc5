"""Decoded trace data models."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Kind of value an attribute carries."""

    TIMESTAMP = "timestamp"
    DURATION = "duration"
    NUMBER = "number"
    TEXT = "text"
    OBJECT = "object"


class TimeField(str, Enum):
    """Time roles a decoder can assign to attributes."""

    START_TIME = "startTime"
    END_TIME = "endTime"


@dataclass(frozen=True)
class Attribute:
    """A named, typed field of an event type."""

    identifier: str
    kind: ValueKind


@dataclass(frozen=True)
class EventType:
    """Shape descriptor shared by all records of one event type."""

    identifier: str
    attributes: tuple[Attribute, ...] = ()
    time_fields: Mapping[TimeField, str] = field(default_factory=dict)

    def attribute(self, identifier: str) -> Attribute | None:
        """Look up an attribute by identifier."""
        for attribute in self.attributes:
            if attribute.identifier == identifier:
                return attribute
        return None

    def time_attribute(self, time_field: TimeField) -> Attribute | None:
        """Return the attribute the decoder tagged with the given time role."""
        identifier = self.time_fields.get(time_field)
        if identifier is None:
            return None
        return self.attribute(identifier)


@dataclass(frozen=True)
class EventRecord:
    """A single decoded event."""

    event_type: EventType
    values: Mapping[str, Any]

    def value(self, attribute: Attribute) -> Any:
        """Raw value of an attribute, None when the record does not carry it."""
        return self.values.get(attribute.identifier)


@dataclass(frozen=True)
class EventGroup:
    """All records of one event type."""

    event_type: EventType
    records: Sequence[EventRecord] = ()

    @property
    def has_records(self) -> bool:
        return len(self.records) > 0
