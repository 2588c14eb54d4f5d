# instrtime/core/config.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Protocol, runtime_checkable

import numpy as np
import toml

from .exceptions import InvalidStreakConfig
from .relative import RelativeTime


logger = logging.getLogger(__name__)


@runtime_checkable
class QualityMultiplier(Protocol):
    """Anything that scores a streak by how long it lasted."""

    def quality_multiplier_by_duration(self, duration: RelativeTime) -> float: ...


@dataclass(frozen=True, slots=True)
class StreakAnalysisConfig:
    """
    Duration-dependent weighting of streak quality.

    The table is a step function: a streak lasting at least
    ``duration_breakpoints[i]`` seconds (and less than the next breakpoint)
    scores ``multipliers[i]``. Durations below the first breakpoint score
    ``multipliers[0]``.

    A TOML file carries the same two arrays::

        [streak_analysis]
        duration_breakpoints = [0, 60, 600, 3600, 36000]
        multipliers = [0.25, 0.5, 0.75, 0.9, 1.0]
    """
    duration_breakpoints: tuple[float, ...] = (0.0, 60.0, 600.0, 3600.0, 36000.0)
    multipliers: tuple[float, ...] = (0.25, 0.5, 0.75, 0.9, 1.0)

    def __post_init__(self) -> None:
        try:
            bp = tuple(float(x) for x in self.duration_breakpoints)
            mul = tuple(float(x) for x in self.multipliers)
        except (TypeError, ValueError) as e:
            raise InvalidStreakConfig(f"StreakAnalysisConfig values must be numeric: {e}") from e

        if not bp:
            raise InvalidStreakConfig("StreakAnalysisConfig needs at least one breakpoint.")
        if len(bp) != len(mul):
            raise InvalidStreakConfig(
                f"StreakAnalysisConfig has {len(bp)} breakpoints but {len(mul)} multipliers."
            )
        if np.any(np.diff(bp) <= 0):
            raise InvalidStreakConfig("StreakAnalysisConfig breakpoints must be strictly increasing.")
        if any(m < 0 or not np.isfinite(m) for m in mul):
            raise InvalidStreakConfig("StreakAnalysisConfig multipliers must be finite and non-negative.")

        object.__setattr__(self, "duration_breakpoints", bp)
        object.__setattr__(self, "multipliers", mul)

    def quality_multiplier_by_duration(self, duration: RelativeTime) -> float:
        idx = int(np.searchsorted(self.duration_breakpoints, duration.in_seconds(), side="right")) - 1
        return self.multipliers[max(idx, 0)]

    # ---- construction from files ----
    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StreakAnalysisConfig":
        section = data.get("streak_analysis", data)
        if not isinstance(section, Mapping):
            raise InvalidStreakConfig("streak_analysis must be a table.")
        kwargs = {k: tuple(section[k]) for k in ("duration_breakpoints", "multipliers") if k in section}
        return cls(**kwargs)

    @classmethod
    def from_toml(cls, path: str | Path) -> "StreakAnalysisConfig":
        with open(path, "r") as f:
            data = toml.load(f)
        cfg = cls.from_mapping(data)
        logger.debug("Loaded streak analysis config from %s: %s", path, cfg)
        return cfg
