# instrtime/io/irig106.py
"""
IRIG-106 instrumentation time words.

Bit layouts are listed least significant field first. Day fields are carried
through unchanged, so a decoded value keeps the day convention of
:class:`InstrumentTime` (day 1 starts at 86400 s).
"""
from __future__ import annotations

from enum import Enum

import numpy as np

from instrtime.core import AbsoluteTime, InstrumentTime
from instrtime.core.instrument import (
    CH4_HOT_RESOLUTION,
    CH4_LOT_RESOLUTION,
    CH4_MOT_RESOLUTION,
)
from instrtime.core.timevalue import (
    NANO,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
)


class TimeEncoding(str, Enum):
    CH4_BINARY = "tes-ch4-binary"
    CH4_BCD = "tes-ch4-bcd"
    CH10_DAY = "tes-ch10-day"
    CH10_DMY = "tes-ch10-dmy"
    CH10_RELATIVE = "tes-ch10-relative"
    CH10_IEEE1588 = "tes-ch10-ieee1588"
    UNDEFINED = "undefined"

    @classmethod
    def parse(cls, text: str) -> "TimeEncoding":
        """Case-insensitive lookup accepting '-' or '_'; unknown text is UNDEFINED."""
        key = text.strip().lower().replace("_", "-")
        for member in cls:
            if member.value == key:
                return member
        return cls.UNDEFINED

    def __str__(self) -> str:
        return self.value


Layout = tuple[tuple[str, int], ...]

# ---- word layouts (LSB first) ----
CH4_BCD_HOT: Layout = (("ones_min", 4), ("tens_min", 3), ("ones_hour", 4), ("tens_hour", 2), ("ones_day", 3))
CH4_BCD_LOT: Layout = (("tens_milli", 4), ("hund_milli", 4), ("ones_sec", 4), ("tens_sec", 3), ("unused", 1))

CH10_DAY_HOT: Layout = (("ones_day", 4), ("tens_day", 4), ("hund_day", 2), ("unused", 6))
CH10_DAY_LOT: Layout = (("ones_min", 4), ("tens_min", 3), ("unused", 1),
                        ("ones_hour", 4), ("tens_hour", 2), ("unused2", 2))
CH10_DAY_MOT: Layout = (("tens_milli", 4), ("hund_milli", 4), ("ones_sec", 4), ("tens_sec", 4))

CH10_DMY_HIGH: Layout = (("ones_day", 4), ("tens_day", 4), ("ones_month", 4), ("tens_month", 1),
                         ("unused", 3), ("ones_year", 4), ("tens_year", 4), ("hund_year", 4),
                         ("thou_year", 2), ("unused2", 2))
CH10_DMY_LOW: Layout = (("tens_milli", 4), ("hund_milli", 4), ("ones_sec", 4), ("tens_sec", 4),
                        ("ones_min", 4), ("tens_min", 3), ("unused", 1),
                        ("ones_hour", 4), ("tens_hour", 2), ("unused2", 2))


def unpack_word(layout: Layout, word: int) -> dict[str, int]:
    fields = {}
    shift = 0
    for name, width in layout:
        fields[name] = (word >> shift) & ((1 << width) - 1)
        shift += width
    return fields


def pack_word(layout: Layout, **values: int) -> int:
    word = 0
    shift = 0
    for name, width in layout:
        value = values.get(name, 0)
        if not 0 <= value < (1 << width):
            raise ValueError(f"{name}={value} does not fit in {width} bits")
        word |= value << shift
        shift += width
    return word


def _check_word(name: str, word: int, bits: int) -> None:
    if not 0 <= word < (1 << bits):
        raise ValueError(f"{name} must be a {bits}-bit value, got {word}")


def _time_of_day(t: InstrumentTime) -> tuple[int, int, int, int]:
    """hour, minute, second and hundredths of a second (truncated)."""
    return t.hour(), t.minute(), t.sec(), t.nanoseconds // (NANO // 100)


# ---- chapter 4 binary ----
def from_ch4_binary(hot: int, lot: int, mot: int) -> InstrumentTime:
    t = InstrumentTime()
    t.from_ch4_binary(hot, lot, mot)
    return t


def to_ch4_binary(t: InstrumentTime) -> tuple[int, int, int]:
    return t.to_ch4_binary()


def decode_ch4_binary_words(hot, lot, mot) -> np.ndarray:
    """
    Vectorized chapter 4 binary decode.

    Parameters
    ----------
    hot, lot, mot:
        array-likes of equal length holding the 16-bit time words.

    Returns
    -------
    np.ndarray
        float64 seconds, one per sample.
    """
    h = np.asarray(hot, dtype=np.uint16).astype(np.float64)
    lo = np.asarray(lot, dtype=np.uint16).astype(np.float64)
    m = np.asarray(mot, dtype=np.uint16).astype(np.float64)
    if not (h.shape == lo.shape == m.shape):
        raise ValueError("hot, lot and mot must have the same shape")
    return h * CH4_HOT_RESOLUTION + lo * CH4_LOT_RESOLUTION + m * CH4_MOT_RESOLUTION


# ---- chapter 4 BCD ----
def from_ch4_bcd(hot: int, lot: int, mot: int) -> InstrumentTime:
    for name, word in (("hot", hot), ("lot", lot), ("mot", mot)):
        _check_word(name, word, 16)
    h = unpack_word(CH4_BCD_HOT, hot)
    lo = unpack_word(CH4_BCD_LOT, lot)
    seconds = (
        h["ones_day"] * SECONDS_PER_DAY
        + (h["tens_hour"] * 10 + h["ones_hour"]) * SECONDS_PER_HOUR
        + (h["tens_min"] * 10 + h["ones_min"]) * SECONDS_PER_MINUTE
        + lo["tens_sec"] * 10 + lo["ones_sec"]
    )
    micro = (lo["hund_milli"] * 10 + lo["tens_milli"]) * 10_000 + mot
    return InstrumentTime(seconds, micro * 1_000)


def to_ch4_bcd(t: InstrumentTime) -> tuple[int, int, int]:
    """
    Encode as BCD hot/lot plus a binary microsecond word.

    The day field is 3 bits wide and keeps only the low bits of the ones
    digit of the day, so days ending in 8 or 9 decode as 0 or 1.
    """
    hour, minute, sec, _ = _time_of_day(t)
    micro = t.nanoseconds // 1_000
    hundredths, mot = divmod(micro, 10_000)
    hot = pack_word(
        CH4_BCD_HOT,
        ones_day=(t.jday() % 10) & 0b111,
        tens_hour=hour // 10, ones_hour=hour % 10,
        tens_min=minute // 10, ones_min=minute % 10,
    )
    lot = pack_word(
        CH4_BCD_LOT,
        tens_sec=sec // 10, ones_sec=sec % 10,
        hund_milli=hundredths // 10, tens_milli=hundredths % 10,
    )
    return hot, lot, mot


# ---- chapter 10 day format ----
def from_ch10_day(hot: int, lot: int, mot: int) -> InstrumentTime:
    for name, word in (("hot", hot), ("lot", lot), ("mot", mot)):
        _check_word(name, word, 16)
    h = unpack_word(CH10_DAY_HOT, hot)
    lo = unpack_word(CH10_DAY_LOT, lot)
    m = unpack_word(CH10_DAY_MOT, mot)
    seconds = (
        (h["hund_day"] * 100 + h["tens_day"] * 10 + h["ones_day"]) * SECONDS_PER_DAY
        + (lo["tens_hour"] * 10 + lo["ones_hour"]) * SECONDS_PER_HOUR
        + (lo["tens_min"] * 10 + lo["ones_min"]) * SECONDS_PER_MINUTE
        + m["tens_sec"] * 10 + m["ones_sec"]
    )
    hundredths = m["hund_milli"] * 10 + m["tens_milli"]
    return InstrumentTime(seconds, hundredths * (NANO // 100))


def to_ch10_day(t: InstrumentTime) -> tuple[int, int, int]:
    """Encode to (hot, lot, mot); resolution is 10 ms."""
    jday = t.jday()
    hour, minute, sec, hundredths = _time_of_day(t)
    hot = pack_word(CH10_DAY_HOT, hund_day=jday // 100, tens_day=(jday % 100) // 10, ones_day=jday % 10)
    lot = pack_word(CH10_DAY_LOT, tens_hour=hour // 10, ones_hour=hour % 10,
                    tens_min=minute // 10, ones_min=minute % 10)
    mot = pack_word(CH10_DAY_MOT, tens_sec=sec // 10, ones_sec=sec % 10,
                    hund_milli=hundredths // 10, tens_milli=hundredths % 10)
    return hot, lot, mot


def ch10_day_to_int64(t: InstrumentTime) -> int:
    """The three chapter 10 day words packed as hot:lot:mot, mot in the low 16 bits."""
    hot, lot, mot = to_ch10_day(t)
    return (hot << 32) | (lot << 16) | mot


# ---- chapter 10 day-month-year format ----
def from_ch10_dmy(high: int, low: int) -> InstrumentTime:
    _check_word("high", high, 32)
    _check_word("low", low, 32)
    h = unpack_word(CH10_DMY_HIGH, high)
    lo = unpack_word(CH10_DMY_LOW, low)
    dt = AbsoluteTime()
    dt.set_ymd(
        h["thou_year"] * 1000 + h["hund_year"] * 100 + h["tens_year"] * 10 + h["ones_year"],
        h["tens_month"] * 10 + h["ones_month"] - 1,
        h["tens_day"] * 10 + h["ones_day"],
        lo["tens_hour"] * 10 + lo["ones_hour"],
        lo["tens_min"] * 10 + lo["ones_min"],
        lo["tens_sec"] * 10 + lo["ones_sec"],
        (lo["hund_milli"] * 10 + lo["tens_milli"]) * (NANO // 100),
    )
    return InstrumentTime.from_absolute(dt)


def to_ch10_dmy(t: InstrumentTime, year: int) -> tuple[int, int]:
    """
    Encode a synced time as (high, low) words.

    The year is not part of an InstrumentTime, so the caller supplies it.
    """
    if not t.is_synced():
        raise ValueError("day-month-year encoding needs a synced time")
    dt = AbsoluteTime()
    dt.set(year, t.jday() - 1)
    month = dt.month() + 1
    mday = dt.mday()
    hour, minute, sec, hundredths = _time_of_day(t)
    high = pack_word(
        CH10_DMY_HIGH,
        thou_year=year // 1000, hund_year=(year % 1000) // 100,
        tens_year=(year % 100) // 10, ones_year=year % 10,
        tens_month=month // 10, ones_month=month % 10,
        tens_day=mday // 10, ones_day=mday % 10,
    )
    low = pack_word(
        CH10_DMY_LOW,
        tens_hour=hour // 10, ones_hour=hour % 10,
        tens_min=minute // 10, ones_min=minute % 10,
        tens_sec=sec // 10, ones_sec=sec % 10,
        hund_milli=hundredths // 10, tens_milli=hundredths % 10,
    )
    return high, low


# ---- chapter 10 IEEE-1588 ----
def from_ieee1588(sec: int, nsec: int) -> InstrumentTime:
    _check_word("sec", sec, 32)
    _check_word("nsec", nsec, 32)
    return InstrumentTime(sec, nsec)


def to_ieee1588(t: InstrumentTime) -> tuple[int, int]:
    if t.seconds < 0:
        raise ValueError("negative time has no IEEE-1588 representation")
    return t.seconds, t.nanoseconds


DECODERS = {
    TimeEncoding.CH4_BINARY: from_ch4_binary,
    TimeEncoding.CH4_BCD: from_ch4_bcd,
    TimeEncoding.CH10_DAY: from_ch10_day,
    TimeEncoding.CH10_DMY: from_ch10_dmy,
    TimeEncoding.CH10_IEEE1588: from_ieee1588,
}


def decode(encoding: TimeEncoding | str, *words: int) -> InstrumentTime:
    """Decode *words* with the decoder registered for *encoding*."""
    enc = encoding if isinstance(encoding, TimeEncoding) else TimeEncoding.parse(encoding)
    try:
        decoder = DECODERS[enc]
    except KeyError:
        raise ValueError(f"no decoder for time encoding {enc.value!r}") from None
    return decoder(*words)
