"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from cyclecast.config import Settings, get_settings
from cyclecast.cycle.analyzer import CycleAnalyzer
from cyclecast.cycle.config_loader import get_cycle_policy


@dataclass(frozen=True)
class AuthContext:
    """Authenticated user context extracted from a Supabase access token."""

    user_id: uuid.UUID  # auth.users.id, the ``sub`` claim
    email: str | None = None
    role: str | None = None
    session_id: str | None = None


async def get_current_user(request: Request) -> AuthContext:
    """Extract the authenticated user from the request state.

    The Supabase auth middleware sets ``request.state.auth`` before routes run.
    """
    auth: AuthContext | None = getattr(request.state, "auth", None)
    if auth is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return auth


def get_analyzer(settings: Annotated[Settings, Depends(get_settings)]) -> CycleAnalyzer:
    path = Path(settings.cycle_config_path) if settings.cycle_config_path else None
    return CycleAnalyzer(get_cycle_policy(path))


# Annotated shortcuts for route signatures
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Analyzer = Annotated[CycleAnalyzer, Depends(get_analyzer)]
