"""FastAPI application setup for Aether Weather."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import get_orchestrator, router as api_router, shutdown_orchestrator
from .config import settings
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="main")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Kick off the initial search on startup and release worker threads on exit."""
    if settings.search_on_startup and settings.default_location:
        logger.info("Running initial search", extra={"location": settings.default_location})
        get_orchestrator().submit(settings.default_location)
    yield
    shutdown_orchestrator()


app = FastAPI(title="Aether Weather", lifespan=lifespan)

# API routes
app.include_router(api_router, prefix="/v1")
