"""Deterministic cycle prediction from historical period start dates.

Calendar method only:

- average cycle length = rounded mean of the intervals between starts
- next period = last start + average cycle length
- ovulation = next period - luteal phase length
- fertile window = the days ending on ovulation day

Every function here is pure.  No I/O, no clock reads unless ``as_of`` is
omitted, no shared mutable state, so one analyzer can serve any number of
concurrent callers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from cyclecast.cycle.config_loader import CyclePolicy
from cyclecast.cycle.constants import MIN_PERIOD_STARTS
from cyclecast.cycle.errors import (
    InsufficientDataError,
    InvalidDateError,
    InvalidOrderError,
    InvalidReferenceDateError,
)
from cyclecast.cycle.models import CyclePhase, CyclePrediction

logger = logging.getLogger("cyclecast.cycle.analyzer")


def _as_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise InvalidDateError(f"Not a valid YYYY-MM-DD date: {value!r}") from exc


def parse_period_dates(values: Iterable[date | datetime | str]) -> list[date]:
    """Coerce dates, datetimes, or ISO-8601 strings to calendar dates.

    Order is preserved; nothing is sorted or de-duplicated here.

    Raises:
        InvalidDateError: If a string is not a valid ``YYYY-MM-DD`` date.
    """
    return [_as_date(v) for v in values]


def cycle_intervals(dates: Sequence[date]) -> list[int]:
    """Return the day counts between consecutive period starts.

    Raises:
        InsufficientDataError: Fewer than two dates.
        InvalidOrderError:     Dates are not strictly increasing.
    """
    if len(dates) < MIN_PERIOD_STARTS:
        raise InsufficientDataError(
            f"At least {MIN_PERIOD_STARTS} period start dates are required, "
            f"got {len(dates)}"
        )

    intervals: list[int] = []
    for prev, cur in zip(dates, dates[1:]):
        delta = (cur - prev).days
        if delta <= 0:
            raise InvalidOrderError(
                f"Period start dates must be strictly increasing: "
                f"{cur.isoformat()} does not follow {prev.isoformat()}"
            )
        intervals.append(delta)
    return intervals


def _round_half_up_mean(values: Sequence[int]) -> int:
    # floor(total / n + 1/2) in exact integer arithmetic
    total = sum(values)
    count = len(values)
    return (2 * total + count) // (2 * count)


def select_recent_starts(
    dates: Sequence[date | datetime | str],
    window: int,
) -> list[date]:
    """Return the ``window`` most recent starts of an oldest-first sequence.

    The whole sequence is checked for strict ordering before anything is
    dropped, so a mistake in older history is still reported.

    Raises:
        InvalidDateError:      A value is not a date.
        InsufficientDataError: Fewer than two dates.
        InvalidOrderError:     Dates are not strictly increasing.
    """
    parsed = parse_period_dates(dates)
    cycle_intervals(parsed)
    return parsed[-window:]


def cycle_day_from_start(period_start: date, query_date: date) -> int:
    """Return the cycle day number for a given date.

    Day 1 = first day of period.  Dates before the period start give zero or
    negative numbers.
    """
    return (query_date - period_start).days + 1


class CycleAnalyzer:
    """Predict the next cycle from historical period start dates.

    Usage::

        analyzer = CycleAnalyzer()
        prediction = analyzer.predict(
            [date(2024, 1, 1), date(2024, 1, 29), date(2024, 2, 26)],
            as_of=date(2024, 3, 8),
        )
        prediction.next_period_start   # date(2024, 3, 25)
        prediction.current_phase       # CyclePhase.OVULATORY
    """

    def __init__(self, policy: CyclePolicy | None = None) -> None:
        self._policy = policy or CyclePolicy()

    @property
    def policy(self) -> CyclePolicy:
        return self._policy

    def compute_average_cycle_length(self, dates: Sequence[date]) -> int:
        """Return the mean interval between consecutive starts, rounded half-up.

        Every supplied date participates; truncating to the most recent
        starts is the caller's job (see ``select_recent_starts``).

        Raises:
            InsufficientDataError: Fewer than two dates.
            InvalidOrderError:     Dates are not strictly increasing.
        """
        return _round_half_up_mean(cycle_intervals(parse_period_dates(dates)))

    def predict(
        self,
        dates: Sequence[date],
        as_of: date | None = None,
    ) -> CyclePrediction:
        """Compute next period, ovulation, fertile window and current phase.

        Args:
            dates: Period start dates, oldest first, strictly increasing.
            as_of: Reference date for the phase (defaults to today).

        Raises:
            InsufficientDataError:     Fewer than two dates.
            InvalidOrderError:         Dates are not strictly increasing.
            InvalidReferenceDateError: ``as_of`` is more than one predicted
                                       cycle before the last start.
        """
        policy = self._policy
        parsed = parse_period_dates(dates)
        reference = _as_date(as_of) if as_of is not None else date.today()

        intervals = cycle_intervals(parsed)
        cycle_length = _round_half_up_mean(intervals)
        last_start = parsed[-1]

        if (last_start - reference).days > cycle_length:
            raise InvalidReferenceDateError(
                f"Reference date {reference.isoformat()} is more than one cycle "
                f"({cycle_length} days) before the last period start "
                f"{last_start.isoformat()}"
            )

        next_start = last_start + timedelta(days=cycle_length)
        ovulation = next_start - timedelta(days=policy.luteal_phase_days)
        fertile_start = ovulation - timedelta(days=policy.fertile_window_days - 1)
        fertile_end = ovulation

        phase = self.classify_phase(
            reference,
            last_start=last_start,
            fertile_window_start=fertile_start,
            fertile_window_end=fertile_end,
            next_period_start=next_start,
        )

        logger.debug(
            "Predicted cycle: length=%d next=%s ovulation=%s phase=%s",
            cycle_length,
            next_start,
            ovulation,
            phase.value,
        )

        return CyclePrediction(
            next_period_start=next_start,
            ovulation_day=ovulation,
            fertile_window_start=fertile_start,
            fertile_window_end=fertile_end,
            average_cycle_length=cycle_length,
            current_phase=phase,
            as_of=reference,
            last_period_start=last_start,
            intervals=tuple(intervals),
            cycle_day=cycle_day_from_start(last_start, reference),
            is_overdue=reference >= next_start,
        )

    def classify_phase(
        self,
        as_of: date,
        *,
        last_start: date,
        fertile_window_start: date,
        fertile_window_end: date,
        next_period_start: date,
    ) -> CyclePhase:
        """Return the phase of ``as_of``.

        Precedence: menstrual days, then the fertile window, then the luteal
        stretch before the next period; anything else is follicular.
        """
        offset = (as_of - last_start).days
        if 0 <= offset < self._policy.menstrual_phase_days:
            return CyclePhase.MENSTRUAL
        if fertile_window_start <= as_of <= fertile_window_end:
            return CyclePhase.OVULATORY
        if fertile_window_end < as_of < next_period_start:
            return CyclePhase.LUTEAL
        return CyclePhase.FOLLICULAR

    def classify_cycle(self, cycle_length: int) -> str:
        """Classify a cycle length as 'short', 'normal', or 'long'."""
        if cycle_length < self._policy.min_cycle_days:
            return "short"
        if cycle_length > self._policy.max_cycle_days:
            return "long"
        return "normal"
