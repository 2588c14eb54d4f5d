# instrtime/core/timevalue.py
from __future__ import annotations

import functools
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


NANO = 1_000_000_000
MICRO = 1_000_000
MILLI = 1_000

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3_600
SECONDS_PER_DAY = 86_400
MINUTES_PER_HOUR = 60
HOURS_PER_DAY = 24


@runtime_checkable
class TimeValueLike(Protocol):
    """Read surface shared by absolute, relative and instrument times."""

    @property
    def seconds(self) -> int: ...

    @property
    def nanoseconds(self) -> int: ...

    def get_nanoseconds(self) -> int: ...

    def in_seconds(self) -> float: ...

    def is_smoothed(self) -> bool: ...


@dataclass(slots=True)
class TimeValue:
    """
    Canonical ``{seconds, nanoseconds, smoothed}`` storage.

    The represented instant or duration is always
    ``seconds * 1e9 + nanoseconds``; ``nanoseconds`` is kept in ``[0, 1e9)``
    and the sign lives in ``seconds`` (so -0.25 s is ``(-1, 750_000_000)``).
    """
    seconds: int = 0
    nanoseconds: int = 0
    smoothed: bool = False

    def __post_init__(self) -> None:
        self.seconds = int(self.seconds)
        self.nanoseconds = int(self.nanoseconds)
        self.adjust()

    def adjust(self) -> None:
        """Carry or borrow so that 0 <= nanoseconds < 1e9."""
        carry, self.nanoseconds = divmod(self.nanoseconds, NANO)
        self.seconds += carry

    def set_nanoseconds(self, n: int) -> None:
        self.seconds, self.nanoseconds = divmod(int(n), NANO)

    def get_nanoseconds(self) -> int:
        return self.seconds * NANO + self.nanoseconds

    def set_seconds(self, s: float) -> None:
        whole = math.floor(s)
        self.seconds = int(whole)
        self.nanoseconds = int(round((s - whole) * NANO))
        self.adjust()

    def in_seconds(self) -> float:
        return self.seconds + self.nanoseconds / NANO

    def in_milliseconds(self) -> float:
        return self.seconds * MILLI + self.nanoseconds / MICRO

    def in_microseconds(self) -> float:
        return self.seconds * MICRO + self.nanoseconds / MILLI

    def in_nanoseconds(self) -> float:
        return float(self.get_nanoseconds())

    def copy(self) -> "TimeValue":
        return TimeValue(self.seconds, self.nanoseconds, self.smoothed)


@functools.total_ordering
class BaseTime(ABC):
    """
    Shared behaviour for the concrete time types.

    Each concrete type owns a :class:`TimeValue` by composition. Comparison is
    only defined between values of the same concrete type and ignores the
    ``smoothed`` flag.
    """

    __slots__ = ("_tv",)

    def __init__(
        self,
        value: str | float | int = 0,
        nanoseconds: int = 0,
        smoothed: bool = False,
    ) -> None:
        """
        Build from text (parsed leniently, a failed parse leaves zero), from
        float seconds, or from integer seconds plus nanoseconds.
        """
        self._tv = TimeValue()
        if isinstance(value, str):
            if not self.from_string(value):
                self._tv = TimeValue()
        elif isinstance(value, float):
            self._tv.set_seconds(value)
        else:
            self._tv = TimeValue(value, nanoseconds)
        if smoothed:
            self._tv.smoothed = True

    @abstractmethod
    def from_string(self, text: str, strict: bool = False) -> bool:
        """Parse *text* into this value and report whether it matched."""

    # ---- construction helpers ----
    @classmethod
    def from_seconds(cls, s: float):
        obj = cls()
        obj._tv.set_seconds(s)
        return obj

    @classmethod
    def from_nanoseconds(cls, n: int, smoothed: bool = False):
        obj = cls()
        obj._tv.set_nanoseconds(n)
        obj._tv.smoothed = smoothed
        return obj

    def copy(self):
        obj = type(self).__new__(type(self))
        obj._tv = self._tv.copy()
        return obj

    # ---- storage access ----
    @property
    def seconds(self) -> int:
        return self._tv.seconds

    @property
    def nanoseconds(self) -> int:
        return self._tv.nanoseconds

    def set_nanoseconds(self, n: int) -> None:
        self._tv.set_nanoseconds(n)

    def get_nanoseconds(self) -> int:
        return self._tv.get_nanoseconds()

    def set_seconds(self, s: float) -> None:
        self._tv.set_seconds(s)

    def in_seconds(self) -> float:
        return self._tv.in_seconds()

    def in_milliseconds(self) -> float:
        return self._tv.in_milliseconds()

    def in_microseconds(self) -> float:
        return self._tv.in_microseconds()

    def in_nanoseconds(self) -> float:
        return self._tv.in_nanoseconds()

    def is_smoothed(self) -> bool:
        return self._tv.smoothed

    def set_smoothed(self, flag: bool = True) -> None:
        self._tv.smoothed = bool(flag)

    # ---- comparison ----
    def _key(self) -> tuple[int, int]:
        return self._tv.seconds, self._tv.nanoseconds

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self._key() < other._key()

    __hash__ = None  # mutable value

    def __float__(self) -> float:
        return self.in_seconds()

    def __repr__(self) -> str:
        flag = ", smoothed" if self._tv.smoothed else ""
        return f"{type(self).__name__}({self.to_string()!r}{flag})"

    def to_string(self) -> str:
        return f"{self._tv.seconds}.{self._tv.nanoseconds:09d}"
