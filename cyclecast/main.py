"""Cyclecast API: FastAPI application entry point.

Run locally:
    uvicorn --factory cyclecast.main:create_app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cyclecast.config import Settings, get_settings
from cyclecast.cycle.config_loader import get_cycle_policy
from cyclecast.middleware.supabase_auth import SupabaseAuthMiddleware
from cyclecast.routers import cycles, health
from cyclecast.services.supabase import close_pool, init_pool

logger = logging.getLogger("cyclecast")


# ---------- Logging ----------

def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.info(
        "Starting Cyclecast API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    # Fail at startup rather than on the first prediction
    policy_path = Path(settings.cycle_config_path) if settings.cycle_config_path else None
    get_cycle_policy(policy_path)
    await init_pool(settings)
    yield
    await close_pool()
    logger.info("Cyclecast API shut down")


# ---------- App factory ----------

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Cyclecast API",
        description=(
            "Deterministic menstrual cycle prediction and period history "
            "backed by Supabase."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ---------- Middleware (last added runs first) ----------

    # Supabase JWT authentication
    app.add_middleware(SupabaseAuthMiddleware, settings=settings)

    # CORS added last so it wraps auth and answers preflight
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    # ---------- Health check (outside the v1 prefix) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    app.include_router(cycles.router, prefix="/api/v1")

    return app
