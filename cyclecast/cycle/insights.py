"""Deterministic summary text layered on top of a prediction.

Nothing here changes the prediction itself.  The regularity label comes from
the spread between the shortest and longest interval used for the average.
"""

from __future__ import annotations

from dataclasses import dataclass

from cyclecast.cycle.config_loader import CyclePolicy
from cyclecast.cycle.models import CyclePrediction

REGULAR = "regular"
VARIES_SLIGHTLY = "varies_slightly"
IRREGULAR = "irregular"

_SENTENCES = {
    REGULAR: "Your cycle appears to be regular.",
    VARIES_SLIGHTLY: "Your cycle length varies slightly.",
    IRREGULAR: (
        "Your cycle length varies noticeably, so treat these dates as a rough guide."
    ),
}


@dataclass(frozen=True)
class CycleInsight:
    """Regularity label, one-sentence summary, and length warnings."""

    regularity: str
    summary: str
    spread_days: int
    warnings: tuple[str, ...] = ()


def classify_regularity(intervals: tuple[int, ...] | list[int], policy: CyclePolicy) -> str:
    spread = max(intervals) - min(intervals) if intervals else 0
    if spread <= policy.regular_max_spread_days:
        return REGULAR
    if spread <= policy.irregular_min_spread_days:
        return VARIES_SLIGHTLY
    return IRREGULAR


def build_insight(prediction: CyclePrediction, policy: CyclePolicy | None = None) -> CycleInsight:
    """Summarise the regularity of the intervals behind ``prediction``."""
    policy = policy or CyclePolicy()
    intervals = prediction.intervals
    regularity = classify_regularity(intervals, policy)

    warnings: list[str] = []
    for length in intervals:
        if length < policy.min_cycle_days:
            warnings.append(
                f"Short cycle detected: {length} days "
                f"(below {policy.min_cycle_days} day minimum)"
            )
        elif length > policy.max_cycle_days:
            warnings.append(
                f"Long cycle detected: {length} days "
                f"(above {policy.max_cycle_days} day maximum)"
            )

    return CycleInsight(
        regularity=regularity,
        summary=_SENTENCES[regularity],
        spread_days=max(intervals) - min(intervals) if intervals else 0,
        warnings=tuple(warnings),
    )
