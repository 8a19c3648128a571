"""Liveness endpoint. Public, no auth required.

Reports the two things a prediction depends on: the cycle policy the
analyzer will use and whether stored period history is reachable.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fastapi import APIRouter

from cyclecast.config import get_settings
from cyclecast.cycle.config_loader import ConfigValidationError, get_cycle_policy
from cyclecast.services.supabase import get_pool

router = APIRouter(tags=["system"])
logger = logging.getLogger("cyclecast.health")


async def _database_reachable() -> bool:
    try:
        pool = get_pool()
        async with pool.acquire() as conn:
            await conn.fetchval("SELECT 1 FROM cycle_entries LIMIT 1")
    except Exception as exc:
        logger.warning("Health check DB query failed: %s", exc)
        return False
    return True


def _policy_summary(path: str | None) -> dict[str, Any] | None:
    try:
        policy = get_cycle_policy(Path(path) if path else None)
    except (ConfigValidationError, FileNotFoundError) as exc:
        logger.error("Cycle policy failed to load: %s", exc)
        return None
    return {
        "version": policy.version,
        "luteal_phase_days": policy.luteal_phase_days,
        "fertile_window_days": policy.fertile_window_days,
        "history_window": policy.history_window,
    }


@router.get("/health")
async def health_check() -> dict:
    """Return 200 while the process is up.

    ``status`` is ``healthy`` only when the policy loaded and the
    ``cycle_entries`` table answered; a missing policy means predictions
    would fail, a missing database only affects stored history.
    """
    settings = get_settings()
    policy = _policy_summary(settings.cycle_config_path)
    db_ok = await _database_reachable()

    if policy is None:
        status = "unhealthy"
    elif db_ok:
        status = "healthy"
    else:
        status = "degraded"

    return {
        "status": status,
        "version": settings.app_version,
        "environment": settings.environment,
        "cycle_policy": policy,
        "database": "connected" if db_ok else "unreachable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
