# instrtime/core/timerange.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .absolute import AbsoluteTime
from .exceptions import InvalidTimeRange, MessageId
from .instrument import InstrumentTime
from .relative import RelativeTime


logger = logging.getLogger(__name__)

TimeLike = InstrumentTime | AbsoluteTime | str


def coerce_instrument_time(value: TimeLike) -> InstrumentTime | None:
    """
    Interpret *value* as an InstrumentTime.

    Strings are tried against the instrument-time grammar first and the
    calendar grammar second; ``None`` means the text matched neither.
    """
    if isinstance(value, InstrumentTime):
        return value.copy()
    if isinstance(value, AbsoluteTime):
        return InstrumentTime.from_absolute(value)
    if isinstance(value, str):
        t = InstrumentTime()
        if t.from_string(value, strict=True):
            return t
        dt = AbsoluteTime()
        if dt.from_string(value, strict=True):
            return InstrumentTime.from_absolute(dt)
        return None
    raise TypeError(f"cannot use {type(value).__name__} as an instrument time")


@dataclass(slots=True)
class TimeRange:
    """
    Pair of optional InstrumentTime bounds.

    An unset bound never excludes anything; while unset it reads as
    ``InstrumentTime.minimum()`` / ``InstrumentTime.maximum()``. When both
    bounds are set ``start_time < stop_time`` always holds.
    """
    start_time: InstrumentTime = field(default_factory=InstrumentTime.minimum)
    start_set: bool = False
    stop_time: InstrumentTime = field(default_factory=InstrumentTime.maximum)
    stop_set: bool = False

    # ---- mutators (False means nothing changed) ----
    def set_start_time(self, value: TimeLike) -> bool:
        t = coerce_instrument_time(value)
        if t is None:
            return False
        if self.stop_set and not t < self.stop_time:
            return False
        self.start_time = t
        self.start_set = True
        return True

    def set_stop_time(self, value: TimeLike) -> bool:
        t = coerce_instrument_time(value)
        if t is None:
            return False
        if self.start_set and not t > self.start_time:
            return False
        self.stop_time = t
        self.stop_set = True
        return True

    def set_range(self, start: TimeLike, stop: TimeLike) -> bool:
        t0 = coerce_instrument_time(start)
        t1 = coerce_instrument_time(stop)
        if t0 is None or t1 is None or not t0 < t1:
            return False
        self.start_time, self.start_set = t0, True
        self.stop_time, self.stop_set = t1, True
        return True

    # ---- queries ----
    def is_start_time_set(self) -> bool:
        return self.start_set

    def is_stop_time_set(self) -> bool:
        return self.stop_set

    def is_start_and_stop_times_set(self) -> bool:
        return self.start_set and self.stop_set

    def is_before(self, t: InstrumentTime) -> bool:
        """True when the whole range lies before *t*."""
        return self.stop_set and self.stop_time < t

    def is_after(self, t: InstrumentTime) -> bool:
        """True when the whole range lies after *t*."""
        return self.start_set and t < self.start_time

    def contains(self, t: InstrumentTime) -> bool:
        return not self.is_before(t) and not self.is_after(t)

    def __contains__(self, t: InstrumentTime) -> bool:
        return self.contains(t)

    def duration(self) -> RelativeTime:
        return self.stop_time - self.start_time

    def to_string(self) -> str:
        opening = "[" if self.start_set else "<"
        closing = "]" if self.stop_set else ">"
        return f"{opening}{self.start_time.to_string()}, {self.stop_time.to_string()}{closing}"

    def __str__(self) -> str:
        return self.to_string()


def configure_range(
    start: str | None = None,
    stop: str | None = None,
    length: str | None = None,
    *,
    time_range: TimeRange | None = None,
) -> TimeRange:
    """
    Build a TimeRange from start, stop and length texts.

    Any two of the three determine the third; all three must agree. Start and
    stop use the instrument-time grammar, length the relative-time grammar.

    Raises
    ------
    InvalidTimeRange
        with the ``MessageId`` of the first problem found.
    """
    result = time_range if time_range is not None else TimeRange()

    problems = [
        f"--{name} is invalid"
        for name, text, valid in (
            ("start-time", start, InstrumentTime.is_valid),
            ("stop-time", stop, InstrumentTime.is_valid),
            ("length-time", length, RelativeTime.is_valid),
        )
        if text is not None and not valid(text)
    ]
    if problems:
        message = "; ".join(problems)
        logger.error("Time range rejected: %s", message)
        raise InvalidTimeRange(message, MessageId.SYNTAX_ERROR_IN_TIME_FIELD)

    t0 = InstrumentTime(start) if start is not None else None
    t1 = InstrumentTime(stop) if stop is not None else None
    span = RelativeTime(length) if length is not None else None

    if span is not None:
        if t0 is None and t1 is None:
            message = "--length-time specified without --start-time or --stop-time."
            logger.error("Time range rejected: %s", message)
            raise InvalidTimeRange(message, MessageId.LENGTH_TIME_WITHOUT_START_OR_STOP_TIME)
        if t0 is not None and t1 is not None and t1 - t0 != span:
            message = "--start-time plus --length-time has to be --stop-time."
            logger.error("Time range rejected: %s", message)
            raise InvalidTimeRange(message, MessageId.STOP_TIME_MINUS_START_TIME_IS_NOT_LENGTH)
        if t1 is None:
            t1 = t0 + span
        elif t0 is None:
            t0 = t1 - span

    if t0 is not None and t1 is not None:
        ok = result.set_range(t0, t1)
    elif t0 is not None:
        ok = result.set_start_time(t0)
    elif t1 is not None:
        ok = result.set_stop_time(t1)
    else:
        ok = True

    if not ok:
        message = "--start-time has to be before --stop-time."
        logger.error("Time range rejected: %s", message)
        raise InvalidTimeRange(message, MessageId.START_TIME_IS_NOT_BEFORE_STOP_TIME)

    logger.debug("Time range configured: %s", result.to_string())
    return result
