# instrtime/core/streak.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from .config import QualityMultiplier, StreakAnalysisConfig
from .instrument import InstrumentTime
from .relative import RelativeTime


logger = logging.getLogger(__name__)


class StreakType(str, Enum):
    STREAK = "STREAK"
    NOISE = "NOISE"


CORRECTED = "CORRECTED"
UNCORRECTED = "UNCORRECTED"

RAW_STREAK_FIELDS = 7
RAW_NOISE_FIELDS = 4
ANALYZED_FIELDS = 13

# analyzed layout: 3 leading fields, the raw record padded to 7, 3 trailing
_RAW_START = 3
_TRAILING_START = _RAW_START + RAW_STREAK_FIELDS


def _parse_count(text: str) -> int | None:
    try:
        value = int(text)
    except ValueError:
        return None
    return value if value >= 0 else None


@dataclass(slots=True)
class StreakSegment:
    """
    One analyzed run of time samples.

    Two line grammars are understood:

    - raw, as written by the streak identifier::

        STREAK,<first>,<last>,<poorly>,<well>,<first time>,<last time>
        NOISE,<first>,<last>,<poorly>

    - analyzed, 13 fields wrapping a raw record::

        <seg start>,<corrected seg start time>,<CORRECTED|UNCORRECTED>,
        <raw record padded to 7 fields>,<quality>,<corrected first>,<corrected last>

    Parsers return ``False`` and set ``error_message`` on malformed input;
    they never raise.
    """
    streak_type: str = StreakType.STREAK.value
    first_offset: int = 0
    last_offset: int = 0
    poorly_behaved_count: int = 0
    well_behaved_count: int = 0
    first_time: InstrumentTime = field(default_factory=InstrumentTime)
    last_time: InstrumentTime = field(default_factory=InstrumentTime)
    quality_value: float = 0.0

    # analyzed / corrected view
    segment_start_offset: int = 0
    corrected_segment_start_time: InstrumentTime = field(default_factory=InstrumentTime)
    corrected_indication: str = UNCORRECTED
    corrected_first_time: InstrumentTime = field(default_factory=InstrumentTime)
    corrected_last_time: InstrumentTime = field(default_factory=InstrumentTime)

    correction_quality_value: float = field(default=0.0, compare=False)
    correction_required: bool = field(default=False, compare=False)
    error_message: str = field(default="", compare=False)
    config: QualityMultiplier = field(default_factory=StreakAnalysisConfig, compare=False, repr=False)

    # ---- derived values ----
    def is_noise(self) -> bool:
        return self.streak_type == StreakType.NOISE.value

    def duration(self) -> RelativeTime:
        return self.last_time - self.first_time

    def total_count(self) -> int:
        return self.poorly_behaved_count + self.well_behaved_count

    def average_delta_time(self) -> RelativeTime:
        """Mean spacing between samples; zero for fewer than two samples."""
        n = self.total_count()
        if n <= 1:
            return RelativeTime()
        return self.duration() / (n - 1)

    # ---- scoring ----
    def calculate_quality_value(self) -> None:
        if self.well_behaved_count == 0:
            self.quality_value = 0.0
            self.correction_required = True
            return
        ratio = self.well_behaved_count / (self.well_behaved_count + self.poorly_behaved_count)
        self.quality_value = ratio * self.config.quality_multiplier_by_duration(self.duration())

    def set_correction_required(self, flag: bool = True) -> None:
        self.correction_required = flag
        if flag:
            self.quality_value = 0.0

    def marked_for_correction(self) -> bool:
        return self.correction_required

    def is_quality_equal(self, other: "StreakSegment") -> bool:
        return self.quality_value == other.quality_value

    def is_quality_less_than(self, other: "StreakSegment") -> bool:
        return self.quality_value < other.quality_value

    # ---- raw grammar ----
    def _fail(self, message: str, text: str) -> bool:
        self.error_message = message
        logger.debug("Rejected streak record %r: %s", text, message)
        return False

    def from_string(self, text: str) -> bool:
        """Parse a raw streak-identifier record."""
        self.error_message = ""
        fields = text.split(",")
        kind = fields[0]

        if kind not in (StreakType.STREAK.value, StreakType.NOISE.value):
            return self._fail("Incorrect Type", text)
        if kind == StreakType.STREAK.value and len(fields) != RAW_STREAK_FIELDS:
            return self._fail("STREAK token error", text)
        if kind == StreakType.NOISE.value and len(fields) != RAW_NOISE_FIELDS:
            return self._fail("NOISE token error", text)

        first_offset = _parse_count(fields[1])
        last_offset = _parse_count(fields[2])
        poorly = _parse_count(fields[3])
        if first_offset is None or last_offset is None:
            return self._fail(f"{kind} : offsets must be non-negative integers", text)
        if poorly is None:
            return self._fail(f"{kind} : poorly-behaved-count must be a non-negative integer", text)

        invalid_time_mark = False
        if kind == StreakType.NOISE.value:
            if poorly < 1:
                return self._fail("NOISE : poorly-behaved-count is 0", text)
            well = 0
            first_time = InstrumentTime()
            last_time = InstrumentTime()
        else:
            well = _parse_count(fields[4])
            if well is None:
                return self._fail("STREAK : well-behaved-count must be a non-negative integer", text)
            if well < 1:
                return self._fail("STREAK : well-behaved-count is 0", text)
            invalid_time_mark = not (InstrumentTime.is_valid(fields[5]) and InstrumentTime.is_valid(fields[6]))
            first_time = InstrumentTime(fields[5])
            last_time = InstrumentTime(fields[6])

        self.streak_type = kind
        self.first_offset = first_offset
        self.last_offset = last_offset
        self.poorly_behaved_count = poorly
        self.well_behaved_count = well
        self.first_time = first_time
        self.last_time = last_time

        # corrected view starts out equal to the raw one
        self.segment_start_offset = first_offset
        self.corrected_indication = UNCORRECTED
        self.corrected_segment_start_time = first_time.copy()
        self.corrected_first_time = first_time.copy()
        self.corrected_last_time = last_time.copy()

        self.calculate_quality_value()
        self.correction_quality_value = 0.0 if invalid_time_mark else self.quality_value
        return True

    def _raw_time(self, t: InstrumentTime) -> str:
        return "" if self.is_noise() else t.to_string()

    def to_raw_string(self) -> str:
        head = f"{self.streak_type},{self.first_offset},{self.last_offset},{self.poorly_behaved_count}"
        if self.is_noise():
            return head
        return f"{head},{self.well_behaved_count},{self.first_time.to_string()},{self.last_time.to_string()}"

    # ---- analyzed grammar ----
    def from_analyzed_string(self, text: str) -> bool:
        """Parse a 13-field analyzed-streak record."""
        self.error_message = ""
        fields = text.split(",")
        if len(fields) != ANALYZED_FIELDS:
            return self._fail(f"expected {ANALYZED_FIELDS} fields, got {len(fields)}", text)

        segment_start = _parse_count(fields[0])
        if segment_start is None:
            return self._fail("segment start offset must be a non-negative integer", text)
        if not InstrumentTime.is_valid(fields[1]):
            return self._fail("invalid corrected segment start time", text)
        indication = fields[2]
        if indication not in (CORRECTED, UNCORRECTED):
            return self._fail(f"corrected indication must be {CORRECTED} or {UNCORRECTED}", text)

        raw_width = RAW_NOISE_FIELDS if fields[_RAW_START] == StreakType.NOISE.value else RAW_STREAK_FIELDS
        raw = StreakSegment(config=self.config)
        if not raw.from_string(",".join(fields[_RAW_START:_RAW_START + raw_width])):
            return self._fail(raw.error_message, text)
        # NOISE padding is written as a zero count and two empty times
        if raw.is_noise() and fields[_RAW_START + RAW_NOISE_FIELDS:_TRAILING_START] != ["0", "", ""]:
            return self._fail("NOISE : padding fields must be '0', '', ''", text)

        quality_text, first_text, last_text = fields[_TRAILING_START:]
        try:
            quality = float(quality_text)
        except ValueError:
            return self._fail("quality value must be a number", text)
        if not InstrumentTime.is_valid(first_text):
            return self._fail("invalid corrected first time", text)
        if not InstrumentTime.is_valid(last_text):
            return self._fail("invalid corrected last time", text)

        self.streak_type = raw.streak_type
        self.first_offset = raw.first_offset
        self.last_offset = raw.last_offset
        self.poorly_behaved_count = raw.poorly_behaved_count
        self.well_behaved_count = raw.well_behaved_count
        self.first_time = raw.first_time
        self.last_time = raw.last_time
        self.correction_required = raw.correction_required
        self.correction_quality_value = raw.correction_quality_value

        self.segment_start_offset = segment_start
        self.corrected_segment_start_time = InstrumentTime(fields[1])
        self.corrected_indication = indication
        self.quality_value = quality
        self.corrected_first_time = InstrumentTime(first_text)
        self.corrected_last_time = InstrumentTime(last_text)
        return True

    def to_string(self) -> str:
        """Serialize in the 13-field analyzed layout."""
        return ",".join((
            str(self.segment_start_offset),
            self.corrected_segment_start_time.to_string(),
            self.corrected_indication,
            self.streak_type,
            str(self.first_offset),
            str(self.last_offset),
            str(self.poorly_behaved_count),
            str(self.well_behaved_count),
            self._raw_time(self.first_time),
            self._raw_time(self.last_time),
            repr(float(self.quality_value)),
            self.corrected_first_time.to_string(),
            self.corrected_last_time.to_string(),
        ))

    def __str__(self) -> str:
        return self.to_string()

    # ---- validation helpers ----
    @staticmethod
    def is_valid_raw(text: str) -> bool:
        return StreakSegment().from_string(text)

    @staticmethod
    def is_valid_analyzed(text: str) -> bool:
        return StreakSegment().from_analyzed_string(text)

