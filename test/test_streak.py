# test/test_streak.py
import logging

import pytest

from instrtime.core import (
    CORRECTED,
    UNCORRECTED,
    InstrumentTime,
    RelativeTime,
    StreakAnalysisConfig,
    StreakSegment,
    StreakType,
)


RAW_STREAK = "STREAK,100,119,3,17,003:01:30:00.100000,003:01:30:25.001000"
RAW_NOISE = "NOISE,10,20,5"

ANALYZED_STREAK = (
    "100,003:01:32:00.100000,CORRECTED,STREAK,100,119,3,17,"
    "003:01:30:00.100000,003:01:30:25.001000,0.5,"
    "003:01:32:00.100000,003:01:32:25.001000"
)
ANALYZED_NOISE = (
    "10,000:00:00:00.000000,UNCORRECTED,NOISE,10,20,5,0,,,0.0,"
    "000:00:00:00.000000,000:00:00:00.000000"
)


def _raw(text: str = RAW_STREAK, **kwargs) -> StreakSegment:
    seg = StreakSegment(**kwargs)
    assert seg.from_string(text), seg.error_message
    return seg


def test_defaults():
    seg = StreakSegment()
    assert seg.streak_type == StreakType.STREAK.value
    assert seg.total_count() == 0
    assert seg.corrected_indication == UNCORRECTED
    assert seg.first_time == InstrumentTime()
    assert not seg.marked_for_correction()


class TestRawRecord:
    def test_streak(self):
        seg = _raw()
        assert seg.streak_type == "STREAK"
        assert (seg.first_offset, seg.last_offset) == (100, 119)
        assert (seg.poorly_behaved_count, seg.well_behaved_count) == (3, 17)
        assert seg.first_time == InstrumentTime("003:01:30:00.1")
        assert seg.last_time == InstrumentTime("003:01:30:25.001")
        assert seg.duration() == RelativeTime.from_nanoseconds(24_901_000_000)
        assert seg.total_count() == 20

    def test_quality(self):
        seg = _raw()
        multiplier = StreakAnalysisConfig().quality_multiplier_by_duration(seg.duration())
        assert seg.quality_value == pytest.approx(17 / 20 * multiplier)
        assert seg.quality_value == pytest.approx(0.2125)
        assert seg.correction_quality_value == seg.quality_value
        assert not seg.marked_for_correction()

    def test_quality_uses_given_multiplier(self):
        cfg = StreakAnalysisConfig(duration_breakpoints=(0,), multipliers=(1.0,))
        seg = _raw(config=cfg)
        assert seg.quality_value == pytest.approx(0.85)

    def test_corrected_view_mirrors_raw(self):
        seg = _raw()
        assert seg.segment_start_offset == 100
        assert seg.corrected_indication == UNCORRECTED
        assert seg.corrected_segment_start_time == seg.first_time
        assert seg.corrected_first_time == seg.first_time
        assert seg.corrected_last_time == seg.last_time
        assert seg.corrected_first_time is not seg.first_time

    def test_noise(self):
        seg = _raw(RAW_NOISE)
        assert seg.is_noise()
        assert seg.poorly_behaved_count == 5
        assert seg.well_behaved_count == 0
        assert seg.quality_value == 0.0
        assert seg.marked_for_correction()
        assert seg.average_delta_time() == RelativeTime()

    def test_invalid_time_zeroes_correction_quality(self):
        seg = _raw("STREAK,1,2,3,4,003:25:00:00,003:00:00:01")
        assert seg.first_time == InstrumentTime(3 * 86400 + 25 * 3600)
        assert seg.quality_value > 0
        assert seg.correction_quality_value == 0.0

        seg = _raw("STREAK,1,2,3,4,003:00:00:00,003:00:61:00")
        assert seg.correction_quality_value == 0.0

    def test_raw_string(self):
        assert _raw().to_raw_string() == RAW_STREAK
        assert _raw(RAW_NOISE).to_raw_string() == RAW_NOISE

    @pytest.mark.parametrize(
        "text, message",
        [
            ("FOO,1,2,3", "Incorrect Type"),
            ("", "Incorrect Type"),
            ("STREAK,1,2,3", "STREAK token error"),
            ("NOISE,1,2,3,4", "NOISE token error"),
            ("NOISE,1,2,0", "NOISE : poorly-behaved-count is 0"),
            ("STREAK,1,2,3,0,003:00:00:00,003:00:00:01", "STREAK : well-behaved-count is 0"),
        ],
    )
    def test_rejects(self, text, message):
        seg = StreakSegment()
        assert not seg.from_string(text)
        assert seg.error_message == message
        assert not StreakSegment.is_valid_raw(text)

    def test_non_numeric_fields(self):
        for text in (
            "STREAK,a,2,3,4,003:00:00:00,003:00:00:01",
            "STREAK,1,2,-3,4,003:00:00:00,003:00:00:01",
            "STREAK,1,2,3,x,003:00:00:00,003:00:00:01",
            "NOISE,1,b,3",
        ):
            seg = StreakSegment()
            assert not seg.from_string(text), text
            assert seg.error_message

    def test_rejection_is_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="instrtime.core.streak")
        StreakSegment().from_string("FOO,1,2,3")
        assert "Incorrect Type" in caplog.text

    def test_zero_well_behaved_always_needs_correction(self):
        for poorly in range(1, 50):
            seg = StreakSegment(poorly_behaved_count=poorly, well_behaved_count=0)
            seg.calculate_quality_value()
            assert seg.quality_value == 0.0
            assert seg.marked_for_correction()


class TestAnalyzedRecord:
    def test_streak(self):
        seg = StreakSegment()
        assert seg.from_analyzed_string(ANALYZED_STREAK), seg.error_message
        assert seg.segment_start_offset == 100
        assert seg.corrected_indication == CORRECTED
        assert seg.corrected_segment_start_time == InstrumentTime("003:01:32:00.1")
        assert seg.quality_value == 0.5
        assert seg.first_time == InstrumentTime("003:01:30:00.1")
        assert seg.corrected_first_time == InstrumentTime("003:01:32:00.100000")
        assert seg.corrected_last_time == InstrumentTime("003:01:32:25.001000")
        assert seg.well_behaved_count == 17

    def test_noise(self):
        seg = StreakSegment()
        assert seg.from_analyzed_string(ANALYZED_NOISE), seg.error_message
        assert seg.is_noise()
        assert seg.poorly_behaved_count == 5
        assert seg.marked_for_correction()

    def test_correction_flags_follow_embedded_record(self):
        seg = StreakSegment()
        assert seg.from_analyzed_string(ANALYZED_NOISE)
        assert seg.marked_for_correction()

        assert seg.from_analyzed_string(ANALYZED_STREAK)
        assert not seg.marked_for_correction()
        assert seg.correction_quality_value == pytest.approx(0.2125)

    @pytest.mark.parametrize("padding", ["zz,yy,xx", "1,,", "0,003:00:00:00,", "0,,x"])
    def test_noise_padding_must_be_empty(self, padding):
        line = ANALYZED_NOISE.replace(",0,,,", f",{padding},")
        seg = StreakSegment()
        assert not seg.from_analyzed_string(line)
        assert seg.error_message.startswith("NOISE")

    def test_to_string_reproduces_line(self):
        for line in (ANALYZED_STREAK, ANALYZED_NOISE):
            seg = StreakSegment()
            assert seg.from_analyzed_string(line)
            assert seg.to_string() == line
            assert str(seg) == line

    def test_raw_then_analyzed(self):
        seg = _raw()
        back = StreakSegment()
        assert back.from_analyzed_string(seg.to_string()), back.error_message
        assert back == seg

    @pytest.mark.parametrize(
        "line",
        [
            ANALYZED_STREAK.rsplit(",", 1)[0],
            ANALYZED_STREAK.replace("100,003:01:32:00.100000,", "x,003:01:32:00.100000,", 1),
            ANALYZED_STREAK.replace("003:01:32:00.100000,CORRECTED", "003:99:32:00.100000,CORRECTED"),
            ANALYZED_STREAK.replace("CORRECTED", "MAYBE"),
            ANALYZED_STREAK.replace(",STREAK,", ",FOO,"),
            ANALYZED_STREAK.replace(",0.5,", ",abc,"),
            ANALYZED_STREAK.replace("003:01:32:25.001000", "bad"),
        ],
    )
    def test_rejects(self, line):
        seg = StreakSegment()
        assert not seg.from_analyzed_string(line)
        assert seg.error_message
        assert not StreakSegment.is_valid_analyzed(line)

    def test_embedded_raw_error_is_reported(self):
        seg = StreakSegment()
        assert not seg.from_analyzed_string(ANALYZED_STREAK.replace(",STREAK,", ",FOO,"))
        assert seg.error_message == "Incorrect Type"


def test_equality_ignores_bookkeeping():
    a = _raw()
    b = _raw()
    b.error_message = "stale"
    b.correction_required = True
    b.correction_quality_value = 0.0
    assert a == b

    b.quality_value = 0.9
    assert a != b


def test_average_delta_time():
    seg = _raw()
    assert seg.average_delta_time().in_seconds() == pytest.approx(24.901 / 19, abs=1e-9)


def test_correction_flag_and_quality_comparisons():
    good = _raw()
    poor = _raw()
    assert good.is_quality_equal(poor)

    poor.set_correction_required()
    assert poor.marked_for_correction()
    assert poor.quality_value == 0.0
    assert poor.is_quality_less_than(good)
    assert not good.is_quality_less_than(poor)

    good.set_correction_required(False)
    assert not good.marked_for_correction()
    assert good.quality_value == pytest.approx(0.2125)
