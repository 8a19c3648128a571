"""Cycle prediction and period history endpoints."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from cyclecast.cycle.analyzer import CycleAnalyzer, select_recent_starts
from cyclecast.cycle.errors import CycleAnalysisError
from cyclecast.cycle.insights import build_insight
from cyclecast.dependencies import Analyzer, CurrentUser
from cyclecast.models.cycle import (
    CycleEntryCreate,
    CycleEntryRead,
    CyclePredictionRead,
    PredictCycleRequest,
)
from cyclecast.services.supabase import execute, fetch, fetchrow

router = APIRouter(tags=["cycles"])
logger = logging.getLogger("cyclecast.cycles")

_ENTRY_COLUMNS = "id, user_id, period_start, period_end, cycle_day, created_at"


def _predict(
    analyzer: CycleAnalyzer, starts: Sequence[date], as_of: date | None
) -> CyclePredictionRead:
    try:
        recent = select_recent_starts(starts, analyzer.policy.history_window)
        prediction = analyzer.predict(recent, as_of=as_of or date.today())
    except CycleAnalysisError as exc:
        raise HTTPException(
            status_code=422,
            detail={"error": exc.code, "message": str(exc)},
        ) from exc

    insight = build_insight(prediction, analyzer.policy)
    return CyclePredictionRead.from_prediction(prediction, insight)


@router.post("/predict-cycle", response_model=CyclePredictionRead)
async def predict_cycle(
    user: CurrentUser, analyzer: Analyzer, body: PredictCycleRequest
) -> Any:
    """Predict the next cycle from period starts supplied in the request."""
    return _predict(analyzer, body.last_period_starts, body.as_of)


# ---------- Period history ----------


@router.get("/cycle-entries", response_model=list[CycleEntryRead])
async def list_entries(
    user: CurrentUser,
    limit: int = Query(default=24, ge=1, le=200),
) -> Any:
    rows = await fetch(
        f"""
        SELECT {_ENTRY_COLUMNS} FROM cycle_entries
        WHERE user_id = $1
        ORDER BY period_start DESC NULLS LAST, created_at DESC
        LIMIT $2
        """,
        user.user_id, limit,
        user_id=user.user_id,
    )
    return [dict(r) for r in rows]


@router.post("/cycle-entries", response_model=CycleEntryRead, status_code=201)
async def create_entry(user: CurrentUser, body: CycleEntryCreate) -> Any:
    row = await fetchrow(
        f"""
        INSERT INTO cycle_entries (user_id, period_start, period_end, cycle_day)
        VALUES ($1, $2, $3, $4)
        RETURNING {_ENTRY_COLUMNS}
        """,
        user.user_id, body.period_start, body.period_end, body.cycle_day,
        user_id=user.user_id,
    )
    if not row:
        raise HTTPException(status_code=500, detail="Cycle entry was not stored")
    return dict(row)


@router.get("/cycle-entries/prediction", response_model=CyclePredictionRead)
async def predict_from_history(
    user: CurrentUser,
    analyzer: Analyzer,
    as_of: date | None = Query(default=None),
) -> Any:
    """Predict the next cycle from the user's stored period starts."""
    rows = await fetch(
        """
        SELECT DISTINCT period_start FROM cycle_entries
        WHERE user_id = $1 AND period_start IS NOT NULL
        ORDER BY period_start
        """,
        user.user_id,
        user_id=user.user_id,
    )
    starts = [r["period_start"] for r in rows]
    logger.debug("Predicting from %d stored period starts", len(starts))
    return _predict(analyzer, starts, as_of)


@router.delete("/cycle-entries/{entry_id}", status_code=204)
async def delete_entry(entry_id: uuid.UUID, user: CurrentUser) -> None:
    result = await execute(
        "DELETE FROM cycle_entries WHERE id = $1 AND user_id = $2",
        entry_id, user.user_id,
        user_id=user.user_id,
    )
    if result == "DELETE 0":
        raise HTTPException(status_code=404, detail="Cycle entry not found")
