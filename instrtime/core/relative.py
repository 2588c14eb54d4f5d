# instrtime/core/relative.py
from __future__ import annotations

from fractions import Fraction

from .grammar import grammar, match_first, fraction_to_nanoseconds
from .timevalue import (
    BaseTime,
    TimeValue,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
)


_FF = r"(?:\.(\d*))?"

# First match wins; the order is part of the format.
RELATIVE_GRAMMARS = (
    grammar("ddd hh:mm:ss", r"(\d+)[ :](\d{1,2}):(\d{1,2}):(\d{1,2})" + _FF,
            "days", "hours", "minutes", "secs", "fraction"),
    grammar("ddd hh:mm", r"(\d+) (\d{1,2}):(\d{1,2})", "days", "hours", "minutes"),
    grammar("ddd hh", r"(\d+) (\d{1,2})", "days", "hours"),
    grammar("hh:mm:ss", r"(\d+):(\d{1,2}):(\d{1,2})" + _FF, "hours", "minutes", "secs", "fraction"),
    grammar("mm:ss", r"(\d+):(\d{1,2})" + _FF, "minutes", "secs", "fraction"),
    grammar("ss", r"(\d+)" + _FF, "secs", "fraction"),
    grammar("ff", r"\.(\d*)", "fraction"),
)

# Strict limits per field. The leading field of a grammar is unbounded
# ("90:00" is ninety minutes) except where a day count precedes it.
_LIMITS = {"hours": 23, "minutes": 59, "secs": 59}


def split_sign(text: str) -> tuple[bool, str]:
    """Strip leading blanks and an optional '-' sign."""
    body = text.lstrip()
    if body.startswith("-"):
        return True, body[1:].lstrip()
    return False, body


def fields_to_nanoseconds(fields: dict[str, str]) -> int:
    seconds = (
        int(fields.get("days", 0)) * SECONDS_PER_DAY
        + int(fields.get("hours", 0)) * SECONDS_PER_HOUR
        + int(fields.get("minutes", 0)) * SECONDS_PER_MINUTE
        + int(fields.get("secs", 0))
    )
    return seconds * 1_000_000_000 + fraction_to_nanoseconds(fields.get("fraction"))


class RelativeTime(BaseTime):
    """
    Signed duration with nanosecond resolution.

    Text forms, tried in this order::

        ddd[ :]hh:mm:ss[.f*]   ddd hh:mm   ddd hh
        hh:mm:ss[.f*]          mm:ss[.f*]  ss[.f*]   .f*

    Examples
    --------
    >>> RelativeTime("1 02:03:04.5").in_seconds()
    93784.5
    >>> RelativeTime(90.25).to_string()
    '  0 00:01:30.250000000'
    """

    __slots__ = ()

    def from_string(self, text: str, strict: bool = False) -> bool:
        negative, body = split_sign(text)
        found = match_first(RELATIVE_GRAMMARS, body)
        if found is None:
            return False
        g, fields = found
        if strict:
            present = g.checked
            # the first field of a grammar without a day count may overflow
            if g.fields[0] != "days":
                present = present - {g.fields[0]}
            for name in present:
                if name in fields and int(fields[name]) > _LIMITS[name]:
                    return False

        ns = fields_to_nanoseconds(fields)
        self._tv.set_nanoseconds(-ns if negative else ns)
        self._tv.smoothed = False
        return True

    @staticmethod
    def is_valid(text: str) -> bool:
        return RelativeTime().from_string(text, strict=True)

    def to_string(self, stop_at_seconds: bool = False) -> str:
        total = self.get_nanoseconds()
        sign = "-" if total < 0 else ""
        seconds, nanos = divmod(abs(total), 1_000_000_000)
        days, seconds = divmod(seconds, SECONDS_PER_DAY)
        hours, seconds = divmod(seconds, SECONDS_PER_HOUR)
        minutes, seconds = divmod(seconds, SECONDS_PER_MINUTE)
        text = f"{days:3d} {hours:02d}:{minutes:02d}:{seconds:02d}"
        if not stop_at_seconds:
            text += f".{nanos:09d}"
        return sign + text

    def __str__(self) -> str:
        return self.to_string()

    # ---- arithmetic ----
    def _combine(self, other: "RelativeTime", sign: int) -> "RelativeTime":
        ns = self.get_nanoseconds() + sign * other.get_nanoseconds()
        return RelativeTime.from_nanoseconds(ns, self.is_smoothed() or other.is_smoothed())

    def __add__(self, other):
        if type(other) is not RelativeTime:
            return NotImplemented
        return self._combine(other, 1)

    def __sub__(self, other):
        if type(other) is not RelativeTime:
            return NotImplemented
        return self._combine(other, -1)

    def __iadd__(self, other):
        if type(other) is not RelativeTime:
            return NotImplemented
        self._tv = TimeValue(
            self.seconds + other.seconds,
            self.nanoseconds + other.nanoseconds,
            self.is_smoothed() or other.is_smoothed(),
        )
        return self

    def __isub__(self, other):
        if type(other) is not RelativeTime:
            return NotImplemented
        self._tv = TimeValue(
            self.seconds - other.seconds,
            self.nanoseconds - other.nanoseconds,
            self.is_smoothed() or other.is_smoothed(),
        )
        return self

    def __neg__(self) -> "RelativeTime":
        return RelativeTime.from_nanoseconds(-self.get_nanoseconds(), self.is_smoothed())

    def __abs__(self) -> "RelativeTime":
        return RelativeTime.from_nanoseconds(abs(self.get_nanoseconds()), self.is_smoothed())

    def __mul__(self, factor: float) -> "RelativeTime":
        if not isinstance(factor, (int, float)) or isinstance(factor, bool):
            return NotImplemented
        if isinstance(factor, int):
            ns = self.get_nanoseconds() * factor
        else:
            ns = round(self.get_nanoseconds() * factor)
        return RelativeTime.from_nanoseconds(ns, self.is_smoothed())

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "RelativeTime":
        if not isinstance(divisor, (int, float)) or isinstance(divisor, bool):
            return NotImplemented
        if isinstance(divisor, int):
            quotient = round(Fraction(self.get_nanoseconds(), divisor))
        else:
            quotient = round(self.get_nanoseconds() / divisor)
        return RelativeTime.from_nanoseconds(quotient, self.is_smoothed())

    def __bool__(self) -> bool:
        return self.get_nanoseconds() != 0
