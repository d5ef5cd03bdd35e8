"""FastAPI application setup for the Daily Weather Stylist."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from stylist import config
from stylist.services import build_services

from .api import router as api_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared services once, before the first request."""
    if getattr(app.state, "services", None) is None:
        app.state.services = build_services(config.settings)
    yield


app = FastAPI(title="Daily Weather Stylist", lifespan=lifespan)


@app.get("/health")
def health():
    """Liveness check; does not touch any backend."""
    return {"status": "ok"}


# API routes
app.include_router(api_router, prefix="/v1")
