"""Result types produced by the cycle analyzer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


class CyclePhase(str, Enum):
    """Segment of the cycle a reference date falls into."""

    MENSTRUAL = "Menstrual"
    FOLLICULAR = "Follicular"
    OVULATORY = "Ovulatory"
    LUTEAL = "Luteal"


@dataclass(frozen=True)
class CyclePrediction:
    """Immutable prediction computed from historical period start dates.

    Attributes:
        next_period_start:    Last start plus the average cycle length.
        ovulation_day:        Next period start minus the luteal phase length.
        fertile_window_start: First day of the fertile window.
        fertile_window_end:   Last day of the fertile window (ovulation day).
        average_cycle_length: Rounded mean of the intervals, in days.
        current_phase:        Phase of ``as_of``.
        as_of:                Reference date the phase was computed for.
        last_period_start:    Most recent period start used as the anchor.
        intervals:            Day counts between consecutive starts.
        cycle_day:            1-indexed day of ``as_of`` counted from
                              ``last_period_start``; zero or negative when
                              ``as_of`` precedes it.
        is_overdue:           True when ``as_of`` is on or after the
                              predicted next period start.
    """

    next_period_start: date
    ovulation_day: date
    fertile_window_start: date
    fertile_window_end: date
    average_cycle_length: int
    current_phase: CyclePhase
    as_of: date
    last_period_start: date
    intervals: tuple[int, ...] = field(default_factory=tuple)
    cycle_day: int = 1
    is_overdue: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Render the library contract: ISO date strings, int length, phase string."""
        return {
            "predictedNextPeriod": self.next_period_start.isoformat(),
            "fertileWindowStart": self.fertile_window_start.isoformat(),
            "fertileWindowEnd": self.fertile_window_end.isoformat(),
            "ovulationDay": self.ovulation_day.isoformat(),
            "cycleLength": self.average_cycle_length,
            "currentPhase": self.current_phase.value,
        }
