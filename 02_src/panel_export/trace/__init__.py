"""Trace decoding module."""

from .conversion import parse_datetime, parse_duration, to_epoch_millis
from .loader import ITraceLoader, JfrJsonLoader, decode_recording

__all__ = [
    "ITraceLoader",
    "JfrJsonLoader",
    "decode_recording",
    "parse_datetime",
    "parse_duration",
    "to_epoch_millis",
]
