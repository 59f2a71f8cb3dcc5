"""Trace window module."""

from .computer import (
    ITraceWindowComputer,
    TimeFieldResolver,
    TraceWindowComputer,
    substring_time_fields,
    typed_time_fields,
)

__all__ = [
    "ITraceWindowComputer",
    "TimeFieldResolver",
    "TraceWindowComputer",
    "substring_time_fields",
    "typed_time_fields",
]
