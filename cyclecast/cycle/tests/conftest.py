"""Shared fixtures for cycle analyzer tests."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from cyclecast.cycle.analyzer import CycleAnalyzer
from cyclecast.cycle.config_loader import CyclePolicy, load_cycle_policy

# Three regular 28-day cycles
REGULAR_STARTS = [date(2024, 1, 1), date(2024, 1, 29), date(2024, 2, 26)]

# Intervals 30 and 31, mean 30.5
HALF_DAY_STARTS = [date(2024, 1, 1), date(2024, 1, 31), date(2024, 3, 2)]


def build_starts(first: date, lengths: list[int]) -> list[date]:
    """Build period starts from a first date and successive cycle lengths."""
    starts = [first]
    for length in lengths:
        starts.append(starts[-1] + timedelta(days=length))
    return starts


@pytest.fixture
def cycle_policy() -> CyclePolicy:
    """Load the bundled cycle policy."""
    return load_cycle_policy()


@pytest.fixture
def analyzer(cycle_policy: CyclePolicy) -> CycleAnalyzer:
    return CycleAnalyzer(cycle_policy)
