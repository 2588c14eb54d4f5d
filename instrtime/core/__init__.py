# instrtime/core/__init__.py
"""
Core domain objects for instrtime.

This module defines the time model used to correct telemetry timestamps:
- TimeValue: canonical {seconds, nanoseconds, smoothed} storage
- AbsoluteTime: calendar instant since 1970-01-01
- RelativeTime: signed duration
- InstrumentTime: on-board clock value (synced day-of-year or elapsed)
- TimeRange: optional start/stop bounds over InstrumentTime
- StreakSegment: one analyzed run of time samples, scored and serializable

The core layer is independent from files and binary time-word formats.
"""

from .timevalue import TimeValue, TimeValueLike, BaseTime
from .relative import RelativeTime
from .absolute import AbsoluteTime, TimeLocation
from .instrument import InstrumentTime
from .timerange import TimeRange, configure_range
from .config import StreakAnalysisConfig, QualityMultiplier
from .streak import StreakSegment, StreakType, CORRECTED, UNCORRECTED
from .exceptions import (
    CoreError,
    Severity,
    Facility,
    MessageId,
    FatalCondition,
    StreakFileNotFound,
    InvalidStreakRecord,
    InvalidTimeRange,
    InvalidStreakConfig,
)


__all__ = [
    # time values
    "TimeValue",
    "TimeValueLike",
    "BaseTime",
    "RelativeTime",
    "AbsoluteTime",
    "TimeLocation",
    "InstrumentTime",

    # ranges and streaks
    "TimeRange",
    "configure_range",
    "StreakSegment",
    "StreakType",
    "CORRECTED",
    "UNCORRECTED",

    # configuration
    "StreakAnalysisConfig",
    "QualityMultiplier",

    # exceptions
    "CoreError",
    "Severity",
    "Facility",
    "MessageId",
    "FatalCondition",
    "StreakFileNotFound",
    "InvalidStreakRecord",
    "InvalidTimeRange",
    "InvalidStreakConfig",
]
