from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterator, List, Protocol

from instrtime.core import (
    InvalidStreakRecord,
    QualityMultiplier,
    StreakFileNotFound,
    StreakSegment,
)


logger = logging.getLogger(__name__)

# existence check, swappable for tests or non-local storage
ExistsCheck = Callable[[str], bool]


def file_exists(path: str) -> bool:
    return os.path.isfile(path)


class StreakReader(Protocol):
    """Protocol for sources of analyzed streak segments.

    Implementations yield segments in file order and raise a fatal condition
    instead of returning a partial result.
    """

    def iter_segments(self) -> Iterator[StreakSegment]:
        ...

    def list_segments(self) -> List[StreakSegment]:
        ...


class AnalyzedStreakReader:
    """Reads an analyzed-streak file, one 13-field record per line.

    Reading stops at end of file or at the first blank line. Any record that
    does not parse aborts the read with :class:`InvalidStreakRecord`.
    """

    def __init__(
        self,
        path: str | Path,
        config: QualityMultiplier | None = None,
        exists: ExistsCheck = file_exists,
    ):
        self.path = str(path)
        self._config = config
        self._exists = exists

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------
    def _check_exists(self) -> None:
        if not self._exists(self.path):
            logger.error("Analyzed streak file not found: %s", self.path)
            raise StreakFileNotFound(self.path)

    def _new_segment(self) -> StreakSegment:
        if self._config is None:
            return StreakSegment()
        return StreakSegment(config=self._config)

    def iter_segments(self) -> Iterator[StreakSegment]:
        """Check the file is there, then lazily parse it line by line."""
        self._check_exists()
        return self._read()

    def _read(self) -> Iterator[StreakSegment]:
        with open(self.path, "rb") as f:
            for line_number, raw in enumerate(f, start=1):
                try:
                    line = raw.decode("utf-8").rstrip("\r\n")
                except UnicodeDecodeError as e:
                    text = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                    logger.error("Undecodable line in %s:%d: %s", self.path, line_number, e)
                    raise InvalidStreakRecord(text, line_number, str(e)) from e
                if not line:
                    logger.debug("Blank line %d ends %s", line_number, self.path)
                    return
                seg = self._new_segment()
                if not seg.from_analyzed_string(line):
                    logger.error(
                        "Invalid analyzed streak record at %s:%d: %s",
                        self.path, line_number, seg.error_message,
                    )
                    raise InvalidStreakRecord(line, line_number, seg.error_message)
                yield seg

    def list_segments(self) -> List[StreakSegment]:
        return list(self.iter_segments())
