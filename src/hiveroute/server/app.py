"""FastAPI application serving the hive API.

Provides:
- REST API under /api/v1/hive for queries, evolution and telemetry
- GET /health for liveness checks
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from hiveroute import __version__
from hiveroute.api import hive as hive_api
from hiveroute.api.hive import router as hive_router

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager: release the hive thread pool on stop."""
    logger.info("HiveRoute server starting")
    yield
    engine = hive_api._engine
    if engine is not None:
        engine.shutdown(wait=True)
    logger.info("HiveRoute server stopped")


app = FastAPI(
    title="HiveRoute",
    description="Multi-specialist query routing with context scoring and consensus",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(hive_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
