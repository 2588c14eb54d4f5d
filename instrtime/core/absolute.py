# instrtime/core/absolute.py
from __future__ import annotations

import re
import time
from datetime import datetime, timedelta, timezone
from enum import Enum

from .grammar import grammar, match_first
from .relative import RelativeTime
from .timevalue import (
    BaseTime,
    TimeValue,
    NANO,
    MICRO,
    MILLI,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    HOURS_PER_DAY,
    MINUTES_PER_HOUR,
)


class TimeLocation(str, Enum):
    GMT = "GMT"
    LOCAL = "LOCAL"


DEFAULT_FORMAT = "%F %H:%M:%S.%%6f"
BASELINE_YEAR = 1970

MONTH_NAMES = ("jan", "feb", "mar", "apr", "may", "jun",
               "jul", "aug", "sep", "oct", "nov", "dec")
_MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_FRACTION_DIRECTIVE = re.compile(r"%(\d+)f")

# ---- date grammars (first match wins) ----
DATE_GRAMMARS = (
    grammar("yyyy-mm-dd", r"\s*(\d{4})[/-](\d{2})[/-](\d{2})(.*)", "year", "month", "day", "rest"),
    grammar("mm-dd-yyyy", r"\s*(\d{2})[/-](\d{2})[/-](\d{4})(.*)", "month", "day", "year", "rest"),
    grammar("ddMMMyyyy", r"\s*(\d{2})(\w{3})(\d{2,})(.*)", "day", "month_name", "year", "rest"),
    grammar("MMM dd, yyyy", r"\s*(\w{3}) (\d{1,2}), (\d{2,})(.*)", "month_name", "day", "year", "rest"),
    grammar("ddd", r"\s*(\d{1,3}):*(.*)", "yday", "rest"),
)


def _days_before_year(year: int) -> int:
    """Whole days between 1970-01-01 and January 1st of *year*."""
    if year >= BASELINE_YEAR:
        leaps = sum(1 for y in range(1972, year, 4) if AbsoluteTime.is_leap_year(y))
        return (year - BASELINE_YEAR) * 365 + leaps
    leaps = sum(1 for y in range(1968, year - 1, -4) if AbsoluteTime.is_leap_year(y))
    return (year - BASELINE_YEAR) * 365 - leaps


class AbsoluteTime(BaseTime):
    """
    Calendar instant counted from 1970-01-01T00:00:00Z.

    Accepted date prefixes (an optional time-of-day remainder may follow,
    separated by a blank, ``:`` or ``T``, and is read as a RelativeTime)::

        yyyy-mm-dd   yyyy/mm/dd   mm-dd-yyyy   mm/dd/yyyy
        ddMMMyyyy    MMM dd, yyyy ddd (day of the baseline year)

    ``to_string`` understands the strftime directives plus ``%%<N>f`` for N
    digits of the fractional second.
    """

    __slots__ = ()

    # ---- fixed reference points ----
    @staticmethod
    def baseline() -> "AbsoluteTime":
        return AbsoluteTime(0)

    @staticmethod
    def minimum() -> "AbsoluteTime":
        t = AbsoluteTime()
        t.set_ymd(1970, 0, 1)
        return t

    @staticmethod
    def maximum() -> "AbsoluteTime":
        t = AbsoluteTime()
        t.set_ymd(2500, 11, 12, 23, 59, 59)
        return t

    @staticmethod
    def now() -> "AbsoluteTime":
        return AbsoluteTime.from_nanoseconds(time.time_ns())

    # ---- calendar helpers ----
    @staticmethod
    def is_leap_year(year: int) -> bool:
        return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)

    @staticmethod
    def month_length(month: int) -> int:
        """Days in *month* (0 = January); February is always 28."""
        if month < 0 or month > 11:
            raise ValueError(f"month must be within 0..11, got {month}")
        return _MONTH_LENGTHS[month]

    # ---- setters ----
    def set(
        self,
        year: int,
        yday: int,
        hour: int = 0,
        minute: int = 0,
        sec: int = 0,
        nanoseconds: int = 0,
    ) -> bool:
        """
        Set from a year and a 0-based day of the year.

        A year of 0 stands for the baseline year. No range checks are made.
        """
        if year == 0:
            year = BASELINE_YEAR
        days = _days_before_year(year) + yday
        seconds = (
            days * SECONDS_PER_DAY
            + hour * SECONDS_PER_HOUR
            + minute * SECONDS_PER_MINUTE
            + sec
        )
        self._tv = TimeValue(seconds, nanoseconds)
        return True

    def set_ymd(
        self,
        year: int,
        month: int,
        mday: int,
        hour: int = 0,
        minute: int = 0,
        sec: int = 0,
        nanoseconds: int = 0,
    ) -> bool:
        """Set from year, 0-based month and 1-based day of the month."""
        yday = mday - 1 + sum(self.month_length(m) for m in range(month))
        if self.is_leap_year(year) and month > 1:
            yday += 1
        return self.set(year, yday, hour, minute, sec, nanoseconds)

    # ---- parsing ----
    def from_string(self, text: str, strict: bool = False) -> bool:
        found = match_first(DATE_GRAMMARS, text)
        self._tv.smoothed = False
        if found is None:
            return False
        g, fields = found

        if g.name == "ddd":
            yday = int(fields["yday"])
            if strict and not 0 < yday < 366:
                return False
            self.set(BASELINE_YEAR, yday - 1)
            return self._add_remainder(fields.get("rest", ""), strict)

        year_text = fields["year"]
        year = int(year_text)
        day = int(fields["day"])
        if "month_name" in fields:
            name = fields["month_name"].lower()
            if name not in MONTH_NAMES:
                return False
            month = MONTH_NAMES.index(name) + 1
        else:
            month = int(fields["month"])

        if year < 70:
            year += 2000
        elif year < 100:
            year += 1900

        if strict and not self._check_date(year, month, day, year_text):
            return False

        self.set_ymd(year, month - 1, day)
        return self._add_remainder(fields.get("rest", ""), strict)

    def _check_date(self, year: int, month: int, day: int, year_text: str) -> bool:
        if not BASELINE_YEAR <= year <= 2500:
            return False
        if not 1 <= month <= 12:
            return False
        if year_text.startswith("0") and year_text != "00":
            return False
        if month == 2 and self.is_leap_year(year):
            return 0 < day <= 29
        return 0 < day <= self.month_length(month - 1)

    def _add_remainder(self, rest: str, strict: bool) -> bool:
        if not rest:
            return True
        if rest[0] in " :T":
            rest = rest[1:]
        delta = RelativeTime()
        if not delta.from_string(rest, strict):
            return False
        self._tv = TimeValue(self.seconds + delta.seconds, self.nanoseconds + delta.nanoseconds)
        return True

    @staticmethod
    def is_valid(text: str) -> bool:
        return AbsoluteTime().from_string(text, strict=True)

    # ---- broken-down fields ----
    def to_datetime(self, location: TimeLocation = TimeLocation.GMT) -> datetime:
        """Whole-second calendar view; the fraction is available via nanosec()."""
        dt = _EPOCH + timedelta(seconds=self.seconds)
        if location == TimeLocation.LOCAL:
            dt = dt.astimezone()
        return dt

    def yday(self, location: TimeLocation = TimeLocation.GMT) -> int:
        """Day of the year, January 1st = 0."""
        return self.to_datetime(location).timetuple().tm_yday - 1

    def mday(self, location: TimeLocation = TimeLocation.GMT) -> int:
        return self.to_datetime(location).day

    def month(self, location: TimeLocation = TimeLocation.GMT) -> int:
        """Month of the year, January = 0."""
        return self.to_datetime(location).month - 1

    def year(self, location: TimeLocation = TimeLocation.GMT) -> int:
        return self.to_datetime(location).year

    def hour(self) -> int:
        return (self.seconds // SECONDS_PER_HOUR) % HOURS_PER_DAY

    def minute(self) -> int:
        return (self.seconds // SECONDS_PER_MINUTE) % MINUTES_PER_HOUR

    def sec(self) -> int:
        return self.seconds % SECONDS_PER_MINUTE

    def millisec(self) -> int:
        return self.nanoseconds // (NANO // MILLI)

    def microsec(self) -> int:
        return self.nanoseconds // (NANO // MICRO)

    def nanosec(self) -> int:
        return self.nanoseconds

    def seconds_since_midnight(self) -> float:
        return (self.seconds % SECONDS_PER_DAY) + self.nanoseconds / NANO

    def truncate_seconds_to(self, si_units: int) -> None:
        """Drop fractional precision finer than 1/si_units of a second."""
        if si_units <= 0:
            raise ValueError("si_units must be positive")
        step = NANO // si_units
        self._tv.nanoseconds = self.nanoseconds // step * step

    # ---- formatting ----
    def to_string(
        self,
        fmt: str = DEFAULT_FORMAT,
        location: TimeLocation = TimeLocation.GMT,
    ) -> str:
        """
        Format with strftime directives.

        Parameters
        ----------
        fmt:
            strftime format; ``%F`` is expanded to ``%Y-%m-%d`` and the first
            ``%%<N>f`` is replaced by N digits of the fractional second.
        location:
            GMT or LOCAL calendar fields.
        """
        text = self.to_datetime(location).strftime(fmt.replace("%F", "%Y-%m-%d"))
        m = _FRACTION_DIRECTIVE.search(text)
        if m is None:
            return text
        width = int(m.group(1))
        if width <= 9:
            digits = self.nanoseconds // 10 ** (9 - width)
        else:
            digits = self.nanoseconds * 10 ** (width - 9)
        return text[:m.start()] + f"{digits:0{width}d}" + text[m.end():]

    def to_string_precision(self, precision: int, location: TimeLocation = TimeLocation.GMT) -> str:
        return self.to_string(f"%F %H:%M:%S.%%{precision}f", location)

    @staticmethod
    def format_seconds(seconds: float, fmt: str = DEFAULT_FORMAT) -> str:
        return AbsoluteTime(float(seconds)).to_string(fmt)

    def __str__(self) -> str:
        return self.to_string()

    # ---- arithmetic ----
    def __add__(self, other):
        if not isinstance(other, RelativeTime):
            return NotImplemented
        return AbsoluteTime(
            self.seconds + other.seconds,
            self.nanoseconds + other.nanoseconds,
            self.is_smoothed() or other.is_smoothed(),
        )

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, AbsoluteTime):
            return RelativeTime(
                self.seconds - other.seconds,
                self.nanoseconds - other.nanoseconds,
                self.is_smoothed() or other.is_smoothed(),
            )
        if isinstance(other, RelativeTime):
            return AbsoluteTime(
                self.seconds - other.seconds,
                self.nanoseconds - other.nanoseconds,
                self.is_smoothed() or other.is_smoothed(),
            )
        return NotImplemented

    def __iadd__(self, other):
        if not isinstance(other, RelativeTime):
            return NotImplemented
        self._tv = (self + other)._tv
        return self

    def __isub__(self, other):
        if not isinstance(other, RelativeTime):
            return NotImplemented
        self._tv = (self - other)._tv
        return self
