"""MenoWell API — FastAPI application entry point.

Run locally:
    uvicorn menowell.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from menowell.analytics.content_loader import get_content_library, reload_content_library
from menowell.config import get_settings
from menowell.routers import analytics, health

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("menowell")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.info(
        "Starting MenoWell API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    if settings.content_library_path:
        reload_content_library(Path(settings.content_library_path))
    else:
        get_content_library()
    yield
    logger.info("MenoWell API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="MenoWell API",
        description=(
            "Menopause wellness analytics — correlations, predictive insights, "
            "pattern detection, and personalized recommendations from daily check-ins."
        ),
        version=settings.app_version,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix — always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    app.include_router(analytics.router, prefix="/api/v1")

    return app


app = create_app()
