# instrtime/core/exceptions.py
from __future__ import annotations

from enum import Enum, IntEnum


class CoreError(Exception):
    """Base error for all core-domain exceptions."""


# ---- Fatal-condition descriptors ----
class Severity(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"


class Facility(str, Enum):
    """Subsystem that raised a fatal condition."""
    MAIN = "MAIN"
    SMOOTHING_SEGMENT_COLLECTION = "LIB_TIME_WORK_SMOOTHINGSEGMENTCOLLECTION"
    TIME_SMOOTHER = "LIB_IRIG106_CH10_WORK_TIMESMOOTHER"


class MessageId(IntEnum):
    START_TIME_IS_NOT_BEFORE_STOP_TIME = 0
    STOP_TIME_MINUS_START_TIME_IS_NOT_LENGTH = 1
    SYNTAX_ERROR_IN_TIME_FIELD = 2
    LENGTH_TIME_WITHOUT_START_OR_STOP_TIME = 3
    FILE_OPEN_READ_FAILURE = 100
    FILE_WRONG_TYPE = 101


class FatalCondition(CoreError):
    """
    Structural failure with no sensible partial result.

    Carries the facility, severity and message id alongside the text so a
    caller can route it the same way as any other reported condition.
    """

    def __init__(
        self,
        message: str,
        *,
        facility: Facility,
        message_id: MessageId,
        severity: Severity = Severity.FATAL,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.facility = facility
        self.message_id = message_id
        self.severity = severity

    def __str__(self) -> str:
        return f"[{self.facility.value}:{self.severity.value}:{self.message_id.name}] {self.message}"


class StreakFileNotFound(FatalCondition, FileNotFoundError):
    """Raised when the analyzed-streak input file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"input analyzed-timestreak data file not found: {path}",
            facility=Facility.SMOOTHING_SEGMENT_COLLECTION,
            message_id=MessageId.FILE_OPEN_READ_FAILURE,
        )
        self.path = path


class InvalidStreakRecord(FatalCondition, ValueError):
    """Raised when a line of an analyzed-streak file cannot be parsed."""

    def __init__(self, line: str, line_number: int | None = None, reason: str = "") -> None:
        where = f" (line {line_number})" if line_number is not None else ""
        text = f"invalid input string{where}: {line!r}"
        if reason:
            text = f"{text}: {reason}"
        super().__init__(
            text,
            facility=Facility.TIME_SMOOTHER,
            message_id=MessageId.FILE_WRONG_TYPE,
        )
        self.line = line
        self.line_number = line_number
        self.reason = reason


class InvalidTimeRange(FatalCondition, ValueError):
    """Raised when a start/stop/length combination cannot form a TimeRange."""

    def __init__(self, message: str, message_id: MessageId) -> None:
        super().__init__(message, facility=Facility.MAIN, message_id=message_id)


# ---- Validation / construction errors ----
class InvalidStreakConfig(CoreError, ValueError):
    """Raised when a StreakAnalysisConfig is constructed with invalid inputs."""
