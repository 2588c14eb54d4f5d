# instrtime/io/load.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

import numpy as np

from instrtime.io.streak_reader import AnalyzedStreakReader, ExistsCheck, file_exists
from instrtime.core import InstrumentTime, QualityMultiplier


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransitionPoint:
    """Byte offset at which a corrected time takes effect."""
    offset: int
    time: InstrumentTime

    def __iter__(self) -> Iterator:
        # unpacks as (offset, time)
        yield self.offset
        yield self.time


def create_transition_point_collection(
    file_path: str | Path,
    out: list | None = None,
    *,
    config: QualityMultiplier | None = None,
    exists: ExistsCheck = file_exists,
) -> list[TransitionPoint]:
    """
    Build the ordered transition points of an analyzed-streak file.

    Parameters
    ----------
    file_path:
        analyzed-streak file; reading stops at EOF or the first blank line.
    out:
        optional list to extend. It is only touched once the whole file has
        parsed, so a failure never leaves partial results in it.
    config:
        quality multiplier handed to each parsed segment.
    exists:
        existence check used before the file is opened.

    Returns
    -------
    list[TransitionPoint]
        ``(segment_start_offset, corrected_segment_start_time)`` per line,
        in file order.

    Raises
    ------
    StreakFileNotFound
        if *file_path* does not exist.
    InvalidStreakRecord
        if any line is not a valid analyzed-streak record.
    """
    reader = AnalyzedStreakReader(file_path, config=config, exists=exists)

    points = [
        TransitionPoint(seg.segment_start_offset, seg.corrected_segment_start_time)
        for seg in reader.iter_segments()
    ]

    if out is not None:
        out.extend(points)
    logger.info("Built %d transition points from %s", len(points), reader.path)
    return points


def transition_points_to_numpy(points: Iterable[TransitionPoint]) -> tuple[np.ndarray, np.ndarray]:
    """Return (offsets as uint64, times as float64 seconds)."""
    pts = list(points)
    offsets = np.fromiter((p.offset for p in pts), dtype=np.uint64, count=len(pts))
    seconds = np.fromiter((p.time.in_seconds() for p in pts), dtype=np.float64, count=len(pts))
    return offsets, seconds
