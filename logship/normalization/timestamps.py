from dataclasses import dataclass
from typing import Any, Optional

NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MILLI = 1_000_000


@dataclass(frozen=True)
class EventTime:
    """Agent event time: whole seconds plus nanoseconds since the Unix epoch."""
    seconds: int
    nanoseconds: int = 0

    def unix_nano(self) -> int:
        return self.seconds * NANOS_PER_SECOND + self.nanoseconds


# EventTime, integer nanoseconds, or any other (ignored) shape.
TimestampValue = Any


def time_to_millis(nanos: int) -> int:
    return nanos // NANOS_PER_MILLI


def timestamp_millis(value: TimestampValue) -> Optional[int]:
    """
    Convert a recognised timestamp shape to milliseconds since the epoch.

    Returns None for every other shape. Callers skip the field instead of
    failing, since unknown shapes are expected at high volume.
    """
    if isinstance(value, EventTime):
        return time_to_millis(value.unix_nano())
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return time_to_millis(value)
    return None
