"""Pydantic models for period history and cycle predictions.

Prediction fields use the camelCase names the web client already reads.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import Field, model_validator

from cyclecast.cycle.insights import CycleInsight
from cyclecast.cycle.models import CyclePhase, CyclePrediction
from cyclecast.models.base import CyclecastBase


# ---------- Period history ----------

class CycleEntryBase(CyclecastBase):
    # Rows logged with only a cycle day carry no period start
    period_start: date | None = None
    period_end: date | None = None
    cycle_day: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "CycleEntryBase":
        if (
            self.period_start is not None
            and self.period_end is not None
            and self.period_end < self.period_start
        ):
            raise ValueError("period_end must not be before period_start")
        return self


class CycleEntryCreate(CycleEntryBase):
    period_start: date


class CycleEntryRead(CycleEntryBase):
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime


# ---------- Prediction ----------

class PredictCycleRequest(CyclecastBase):
    last_period_starts: list[date] = Field(alias="lastPeriodStarts")
    as_of: date | None = Field(default=None, alias="asOf")


class CyclePredictionRead(CyclecastBase):
    predicted_next_period: date = Field(alias="predictedNextPeriod")
    fertile_window_start: date = Field(alias="fertileWindowStart")
    fertile_window_end: date = Field(alias="fertileWindowEnd")
    ovulation_day: date = Field(alias="ovulationDay")
    cycle_length: int = Field(alias="cycleLength")
    current_phase: CyclePhase = Field(alias="currentPhase")
    cycle_day: int = Field(alias="cycleDay")
    is_overdue: bool = Field(alias="isOverdue")
    as_of: date = Field(alias="asOf")
    insights: str
    regularity: str
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_prediction(
        cls, prediction: CyclePrediction, insight: CycleInsight
    ) -> "CyclePredictionRead":
        return cls(
            predicted_next_period=prediction.next_period_start,
            fertile_window_start=prediction.fertile_window_start,
            fertile_window_end=prediction.fertile_window_end,
            ovulation_day=prediction.ovulation_day,
            cycle_length=prediction.average_cycle_length,
            current_phase=prediction.current_phase,
            cycle_day=prediction.cycle_day,
            is_overdue=prediction.is_overdue,
            as_of=prediction.as_of,
            insights=insight.summary,
            regularity=insight.regularity,
            warnings=list(insight.warnings),
        )
