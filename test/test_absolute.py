# test/test_absolute.py
import random
import time
from datetime import datetime, timezone

import pytest

from instrtime.core import AbsoluteTime, RelativeTime


JAN_1_2020 = 1_577_836_800
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "text",
    ["2020-01-01", "2020/01/01", "01-01-2020", "01/01/2020", "01jan2020", "01JAN20", "Jan 1, 2020"],
)
def test_date_grammars(text):
    t = AbsoluteTime()
    assert t.from_string(text)
    assert t.seconds == JAN_1_2020
    assert t.nanoseconds == 0


@pytest.mark.parametrize("sep", [" ", ":", "T"])
def test_time_of_day_remainder(sep):
    t = AbsoluteTime(f"2020-01-01{sep}12:30:15.25")
    assert t.seconds == JAN_1_2020 + 45015
    assert t.nanoseconds == 250_000_000


def test_day_of_baseline_year():
    assert AbsoluteTime("032").seconds == 31 * 86400
    assert AbsoluteTime("032 10:00:00").seconds == 31 * 86400 + 36000
    assert AbsoluteTime.is_valid("365")
    assert not AbsoluteTime.is_valid("000")
    assert not AbsoluteTime.is_valid("366")


def test_two_digit_years():
    assert AbsoluteTime("01jan69").year() == 2069
    assert AbsoluteTime("01jan70").year() == 1970
    assert AbsoluteTime("Jan 1, 99").year() == 1999


class TestStrict:
    """Strict parsing rejects what lenient parsing rolls over."""

    def test_day_past_month_end(self):
        assert not AbsoluteTime.is_valid("2020-02-30")
        t = AbsoluteTime()
        assert t.from_string("2020-02-30")
        assert (t.month(), t.mday()) == (2, 1)

    def test_leap_day(self):
        assert AbsoluteTime.is_valid("2020-02-29")
        assert not AbsoluteTime.is_valid("2019-02-29")

    def test_year_and_month_bounds(self):
        assert not AbsoluteTime.is_valid("1969-12-31")
        assert not AbsoluteTime.is_valid("2020-13-01")
        assert not AbsoluteTime.is_valid("0020-01-01")
        assert AbsoluteTime.is_valid("00jan00")

    def test_remainder_is_checked(self):
        assert AbsoluteTime.is_valid("2020-01-01 23:59:59")
        assert not AbsoluteTime.is_valid("2020-01-01 23:60:00")

    def test_month_names_must_be_whole(self):
        assert not AbsoluteTime().from_string("01anf2020")
        assert not AbsoluteTime().from_string("01xyz2020")

    def test_garbage(self):
        assert not AbsoluteTime().from_string("yesterday")
        assert not AbsoluteTime().from_string("2020-01-01 noon")


def test_set_and_calendar_fields():
    t = AbsoluteTime()
    t.set(1970, 0)
    assert t.seconds == 0

    t.set(1972, 59)
    assert (t.year(), t.month(), t.mday(), t.yday()) == (1972, 1, 29, 59)

    t.set(0, 1)
    assert t.seconds == 86400

    t = AbsoluteTime("2020-03-01")
    assert (t.year(), t.month(), t.mday(), t.yday()) == (2020, 2, 1, 60)


def test_before_baseline():
    t = AbsoluteTime()
    t.set_ymd(1969, 11, 31)
    assert t.seconds == -86400
    t.set_ymd(1968, 0, 1)
    assert t.seconds == -731 * 86400


def test_set_ymd_matches_datetime_random():
    rng = random.Random(7)
    t = AbsoluteTime()
    for _ in range(300):
        y = rng.randint(1900, 2400)
        m = rng.randint(1, 12)
        d = rng.randint(1, 28)
        hh, mm, ss = rng.randint(0, 23), rng.randint(0, 59), rng.randint(0, 59)
        t.set_ymd(y, m - 1, d, hh, mm, ss)
        expected = datetime(y, m, d, hh, mm, ss, tzinfo=timezone.utc) - EPOCH
        assert t.seconds == int(expected.total_seconds())


def test_time_of_day_fields():
    t = AbsoluteTime("2020-01-01 12:30:15.123456")
    assert (t.hour(), t.minute(), t.sec()) == (12, 30, 15)
    assert t.millisec() == 123
    assert t.microsec() == 123456
    assert t.nanosec() == 123_456_000
    assert t.seconds_since_midnight() == pytest.approx(45015.123456)


def test_formatting():
    t = AbsoluteTime("2020-01-01 12:30:15.123456")
    assert t.to_string() == "2020-01-01 12:30:15.123456"
    assert str(t) == "2020-01-01 12:30:15.123456"
    assert t.to_string("%F %H:%M:%S.%%3f") == "2020-01-01 12:30:15.123"
    assert t.to_string("%H:%M:%S.%%12f") == "12:30:15.123456000000"
    assert t.to_string("%Y") == "2020"
    assert t.to_string_precision(9) == "2020-01-01 12:30:15.123456000"
    assert AbsoluteTime.format_seconds(0.5) == "1970-01-01 00:00:00.500000"


def test_formatted_text_parses_back():
    t = AbsoluteTime("2020-01-01 12:30:15.123456")
    assert AbsoluteTime(t.to_string()) == t


def test_calendar_helpers():
    assert AbsoluteTime.is_leap_year(2000)
    assert AbsoluteTime.is_leap_year(2024)
    assert not AbsoluteTime.is_leap_year(1900)
    assert not AbsoluteTime.is_leap_year(2023)
    assert AbsoluteTime.month_length(1) == 28
    assert AbsoluteTime.month_length(11) == 31
    with pytest.raises(ValueError):
        AbsoluteTime.month_length(12)


def test_reference_points():
    assert AbsoluteTime.baseline() == AbsoluteTime(0)
    assert AbsoluteTime.minimum() == AbsoluteTime("1970-01-01")
    assert AbsoluteTime.maximum().to_string() == "2500-12-12 23:59:59.000000"

    before = time.time()
    now = AbsoluteTime.now()
    after = time.time()
    assert before - 1 <= float(now) <= after + 1


def test_truncate_seconds_to():
    t = AbsoluteTime(10, 123_456_789)
    t.truncate_seconds_to(1000)
    assert t.nanoseconds == 123_000_000
    with pytest.raises(ValueError):
        t.truncate_seconds_to(0)


def test_arithmetic():
    a = AbsoluteTime("2020-01-02")
    b = AbsoluteTime("2020-01-01")

    diff = a - b
    assert isinstance(diff, RelativeTime)
    assert diff == RelativeTime(86400)

    later = b + RelativeTime(1.5)
    assert isinstance(later, AbsoluteTime)
    assert later.seconds == JAN_1_2020 + 1
    assert later.nanoseconds == 500_000_000

    also_later = RelativeTime(1.5) + b
    assert isinstance(also_later, AbsoluteTime)
    assert also_later == later

    earlier = b - RelativeTime(0.25)
    assert earlier.seconds == JAN_1_2020 - 1
    assert earlier.nanoseconds == 750_000_000

    c = b.copy()
    c += RelativeTime(86400)
    assert c == a
    c -= RelativeTime(86400)
    assert c == b


def test_smoothed_propagates_and_is_cleared_by_parse():
    b = AbsoluteTime("2020-01-01")
    step = RelativeTime(1, 0, smoothed=True)
    assert (b + step).is_smoothed()
    assert (b - step).is_smoothed()

    t = AbsoluteTime(5, 0, smoothed=True)
    assert t.from_string("2020-01-01")
    assert not t.is_smoothed()
