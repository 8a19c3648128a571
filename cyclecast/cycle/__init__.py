"""Deterministic menstrual cycle prediction for Cyclecast.

Dates in, structured prediction out.  Period history is health data; this
subpackage never stores or transmits it.

Modules:
    analyzer       Average cycle length, next period, ovulation, phase
    insights       Regularity summary and cycle-length warnings
    config_loader  YAML policy (luteal length, fertile window, bounds)
    errors         Input error taxonomy
"""

from cyclecast.cycle.analyzer import (
    CycleAnalyzer,
    cycle_day_from_start,
    parse_period_dates,
    select_recent_starts,
)
from cyclecast.cycle.config_loader import CyclePolicy, get_cycle_policy
from cyclecast.cycle.errors import (
    CycleAnalysisError,
    InsufficientDataError,
    InvalidDateError,
    InvalidOrderError,
    InvalidReferenceDateError,
)
from cyclecast.cycle.insights import CycleInsight, build_insight
from cyclecast.cycle.models import CyclePhase, CyclePrediction

__all__ = [
    "CycleAnalyzer",
    "CycleAnalysisError",
    "CycleInsight",
    "CyclePhase",
    "CyclePolicy",
    "CyclePrediction",
    "InsufficientDataError",
    "InvalidDateError",
    "InvalidOrderError",
    "InvalidReferenceDateError",
    "build_insight",
    "cycle_day_from_start",
    "get_cycle_policy",
    "parse_period_dates",
    "select_recent_starts",
]
