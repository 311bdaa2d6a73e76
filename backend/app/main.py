"""FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.app.api.routes.assistant import router as assistant_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.residency import router as residency_router
from backend.app.api.routes.trips import router as trips_router
from backend.app.db.engine import get_async_engine, init_models


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create missing tables on startup."""
    await init_models(get_async_engine())
    yield


app = FastAPI(title="Residency Tracker API", version="0.1.0", lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(trips_router, tags=["trips"])
app.include_router(residency_router, tags=["residency"])
app.include_router(assistant_router, tags=["assistant"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Residency Tracker API", "version": "0.1.0"}
