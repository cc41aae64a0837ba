"""Bloom API: FastAPI application entry point.

Run locally:
    uvicorn src.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.config import Settings, get_settings
from src.cycles.config_loader import get_cycle_config, reload_cycle_config
from src.cycles.predictor import InvalidCycleInput
from src.middleware.rate_limit import RateLimitMiddleware
from src.middleware.security import SecurityHeadersMiddleware
from src.routers import cycles, health

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("bloom")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings: Settings = app.state.settings
    logger.info(
        "Starting Bloom API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    if settings.cycle_config_path:
        reload_cycle_config(Path(settings.cycle_config_path))
    else:
        get_cycle_config()
    yield
    logger.info("Bloom API shut down")


# ---------- Error handlers ----------

async def invalid_cycle_input_handler(request: Request, exc: InvalidCycleInput) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ---------- App factory ----------

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description=(
            "Menstrual cycle engine: period and fertile-window predictions, "
            "calendar day labels, cycle pattern insights, and tracking statistics."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(InvalidCycleInput, invalid_cycle_input_handler)

    # ---------- Middleware (each add_middleware wraps the ones before it) ----------

    # Security headers on every response
    app.add_middleware(SecurityHeadersMiddleware)

    # Rate limiting
    app.add_middleware(RateLimitMiddleware, settings=settings)

    # CORS is added last so it is outermost and answers preflight itself
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "Retry-After"],
    )

    # ---------- Health check (outside v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    app.include_router(cycles.router, prefix="/api/v1")

    return app


app = create_app()
