# instrtime/core/instrument.py
from __future__ import annotations

from .absolute import AbsoluteTime
from .grammar import grammar, match_first, truncate_fraction
from .relative import RelativeTime, split_sign, fields_to_nanoseconds
from .timevalue import (
    BaseTime,
    TimeValue,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
)


_FF = r"(?:\.(\d*))?"

INSTRUMENT_GRAMMARS = (
    grammar("ddd:hh:mm:ss", r"(\d+)[ :](\d{1,2}):(\d{1,2}):(\d{1,2})" + _FF,
            "days", "hours", "minutes", "secs", "fraction"),
    grammar("hh:mm:ss", r"(\d{1,2}):(\d{1,2}):(\d{1,2})" + _FF, "hours", "minutes", "secs", "fraction"),
    grammar("mm:ss", r"(\d{1,2}):(\d{1,2})" + _FF, "minutes", "secs", "fraction"),
    grammar("ss", r"(\d{1,2})" + _FF, "secs", "fraction"),
)

_LIMITS = {"days": 366, "hours": 23, "minutes": 59, "secs": 59}

# IRIG-106 chapter 4 word resolutions (seconds per LSB)
CH4_HOT_RESOLUTION = 655.36
CH4_LOT_RESOLUTION = 0.01
CH4_MOT_RESOLUTION = 1e-6

_WORD_MAX = 0xFFFF


class InstrumentTime(BaseTime):
    """
    On-board telemetry clock value.

    Day 1 starts at 86400 s, so a value whose day field is within 1..366 is
    *synced* (calendar anchored) and anything else, day 0 in particular, is
    *elapsed* time from an arbitrary start. Text form is
    ``ddd:hh:mm:ss.ffffff``.
    """

    __slots__ = ()

    @staticmethod
    def minimum() -> "InstrumentTime":
        return InstrumentTime(0)

    @staticmethod
    def maximum() -> "InstrumentTime":
        return InstrumentTime(367 * SECONDS_PER_DAY)

    @classmethod
    def from_absolute(cls, dt: AbsoluteTime) -> "InstrumentTime":
        """Capture day of year (January 1st = day 1) and time of day."""
        seconds = (
            (dt.yday() + 1) * SECONDS_PER_DAY
            + dt.hour() * SECONDS_PER_HOUR
            + dt.minute() * SECONDS_PER_MINUTE
            + dt.sec()
        )
        return cls(seconds, dt.nanoseconds, dt.is_smoothed())

    # ---- parsing / formatting ----
    def from_string(self, text: str, strict: bool = False) -> bool:
        self._tv = TimeValue()
        negative, body = split_sign(text)
        found = match_first(INSTRUMENT_GRAMMARS, body)
        if found is None:
            return False
        _, fields = found
        if strict:
            for name, limit in _LIMITS.items():
                if name in fields and int(fields[name]) > limit:
                    return False
        ns = fields_to_nanoseconds(fields)
        self._tv.set_nanoseconds(-ns if negative else ns)
        return True

    @staticmethod
    def is_valid(text: str) -> bool:
        return InstrumentTime().from_string(text, strict=True)

    def to_string(self, fraction_length: int = 6) -> str:
        total = self.get_nanoseconds()
        magnitude = InstrumentTime.from_nanoseconds(abs(total))
        text = "%03d:%02d:%02d:%02d" % (
            magnitude.jday(), magnitude.hour(), magnitude.minute(), magnitude.sec()
        )
        if fraction_length > 0:
            text += "." + truncate_fraction(magnitude.nanoseconds, fraction_length)
        return "-" + text if total < 0 else text

    def __str__(self) -> str:
        return self.to_string()

    # ---- fields ----
    def jday(self) -> int:
        return self.seconds // SECONDS_PER_DAY

    def hour(self) -> int:
        return (self.seconds % SECONDS_PER_DAY) // SECONDS_PER_HOUR

    def minute(self) -> int:
        return (self.seconds % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE

    def sec(self) -> int:
        return self.seconds % SECONDS_PER_MINUTE

    def millisec(self) -> int:
        """Milliseconds of the fraction, rounded half up."""
        return (self.nanoseconds // 100_000 + 5) // 10

    def microsec(self) -> int:
        """Microseconds of the fraction, rounded half up."""
        return (self.nanoseconds // 100 + 5) // 10

    def nanosec(self) -> int:
        return self.nanoseconds

    def is_synced(self) -> bool:
        return 1 <= self.jday() <= 366

    def is_elapsed(self) -> bool:
        return not self.is_synced()

    # ---- IRIG-106 chapter 4 binary ----
    def from_ch4_binary(self, hot: int, lot: int, mot: int) -> None:
        """Set from the high, low and microsecond order 16-bit time words."""
        for name, word in (("hot", hot), ("lot", lot), ("mot", mot)):
            if not 0 <= word <= _WORD_MAX:
                raise ValueError(f"{name} must be a 16-bit value, got {word}")
        self._tv = TimeValue()
        self._tv.set_seconds(
            hot * CH4_HOT_RESOLUTION + lot * CH4_LOT_RESOLUTION + mot * CH4_MOT_RESOLUTION
        )

    def to_ch4_binary(self) -> tuple[int, int, int]:
        """Return ``(hot, lot, mot)`` for this value."""
        # 1 ns bias keeps hot from dropping a unit when lot and mot are 0
        s = self.in_seconds() + 1e-9
        if s < 0:
            raise ValueError("negative time has no chapter 4 representation")
        hot = int(s / CH4_HOT_RESOLUTION)
        lot = int((s - hot * CH4_HOT_RESOLUTION) / CH4_LOT_RESOLUTION)
        mot = int((s - hot * CH4_HOT_RESOLUTION - lot * CH4_LOT_RESOLUTION) / CH4_MOT_RESOLUTION)
        if hot > _WORD_MAX:
            raise ValueError(f"time {self.to_string()} overflows the high order word")
        return hot, lot, mot

    # ---- conversions ----
    def to_absolute(self, basis: AbsoluteTime) -> AbsoluteTime:
        """
        Convert to calendar time.

        Parameters
        ----------
        basis:
            January 1st of the recording year for synced values, or the
            calendar instant of elapsed time zero for elapsed values.
        """
        seconds = self.seconds - SECONDS_PER_DAY if self.is_synced() else self.seconds
        result = basis + RelativeTime(seconds, self.nanoseconds)
        result.set_smoothed(self.is_smoothed())
        return result

    # ---- arithmetic ----
    def __add__(self, other):
        if not isinstance(other, RelativeTime):
            return NotImplemented
        result = self.copy()
        result += other
        return result

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, InstrumentTime):
            return RelativeTime.from_nanoseconds(
                self.get_nanoseconds() - other.get_nanoseconds(),
                self.is_smoothed() or other.is_smoothed(),
            )
        if isinstance(other, RelativeTime):
            result = self.copy()
            result -= other
            return result
        return NotImplemented

    def __iadd__(self, other):
        if not isinstance(other, RelativeTime):
            return NotImplemented
        self._tv = TimeValue(
            self.seconds + other.seconds,
            self.nanoseconds + other.nanoseconds,
            self.is_smoothed() or other.is_smoothed(),
        )
        return self

    def __isub__(self, other):
        if not isinstance(other, RelativeTime):
            return NotImplemented
        self._tv = TimeValue(
            self.seconds - other.seconds,
            self.nanoseconds - other.nanoseconds,
            self.is_smoothed() or other.is_smoothed(),
        )
        return self
