"""Trace time window."""

import math
from dataclasses import dataclass

from ..errors import DegenerateWindowError


@dataclass
class TimeWindow:
    """Running [start, end] interval in epoch milliseconds.

    start only ever decreases and end only ever increases. Until a record
    contributes, both stay at their sentinels (+inf / -inf).
    """

    start: float = math.inf
    end: float = -math.inf

    def include_start(self, millis: int) -> None:
        if millis < self.start:
            self.start = millis

    def include_end(self, millis: int) -> None:
        if millis > self.end:
            self.end = millis

    @property
    def is_degenerate(self) -> bool:
        """True when no start or no end timestamp was ever recorded."""
        return math.isinf(self.start) or math.isinf(self.end)

    @property
    def start_ms(self) -> int:
        if self.is_degenerate:
            raise DegenerateWindowError("trace window has no valid start/end timestamps")
        return int(self.start)

    @property
    def end_ms(self) -> int:
        if self.is_degenerate:
            raise DegenerateWindowError("trace window has no valid start/end timestamps")
        return int(self.end)
