"""HTTP API exposing searches and the normalized session to clients."""

import threading
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from .config import settings
from .display import QUICK_CITIES, SessionView, session_view
from .errors import LocationValidationError
from .orchestrator import FetchOrchestrator, build_orchestrator
from .units import TemperatureUnit
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="api")

router = APIRouter()

_orchestrator: Optional[FetchOrchestrator] = None
_orchestrator_lock = threading.Lock()


def get_orchestrator() -> FetchOrchestrator:
    """Process-wide orchestrator, built from settings on first use."""
    global _orchestrator
    with _orchestrator_lock:
        if _orchestrator is None:
            _orchestrator = build_orchestrator(settings)
        return _orchestrator


def use_orchestrator_for_tests(orchestrator: Optional[FetchOrchestrator]) -> None:
    """Swap the process-wide orchestrator (tests inject fakes here)."""
    global _orchestrator
    with _orchestrator_lock:
        _orchestrator = orchestrator


def shutdown_orchestrator() -> None:
    global _orchestrator
    with _orchestrator_lock:
        orchestrator, _orchestrator = _orchestrator, None
    if orchestrator is not None:
        orchestrator.shutdown(wait=False)


class SearchRequest(BaseModel):
    """Incoming search payload."""
    location: str


class SearchResponse(BaseModel):
    """Acknowledgement of an accepted search."""
    generation: int
    loading: bool


class StatusResponse(BaseModel):
    generation: int
    loading: bool
    has_session: bool
    complete: bool


class CitiesResponse(BaseModel):
    cities: list[str]


@router.post("/search", response_model=SearchResponse, status_code=status.HTTP_202_ACCEPTED)
def search(req: SearchRequest):
    """Start a new search; the previous session is discarded."""
    orchestrator = get_orchestrator()
    try:
        orchestrator.submit(req.location)
    except LocationValidationError as exc:
        logger.debug("Rejected blank search")
        raise HTTPException(status_code=422, detail=str(exc))
    return SearchResponse(generation=orchestrator.generation, loading=orchestrator.loading)


@router.get("/status", response_model=StatusResponse)
def get_status():
    """Cheap polling endpoint for the loading indicator."""
    orchestrator = get_orchestrator()
    session = orchestrator.session
    return StatusResponse(
        generation=orchestrator.generation,
        loading=orchestrator.loading,
        has_session=session is not None,
        complete=bool(session and session.is_complete),
    )


@router.get("/session", response_model=SessionView)
def get_current_session(unit: TemperatureUnit = Query(default=TemperatureUnit.CELSIUS)):
    """Return the current session rendered in the requested unit."""
    orchestrator = get_orchestrator()
    loading = orchestrator.loading
    session = orchestrator.session
    if session is None:
        detail = "Search in progress" if loading else "No search submitted yet"
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return session_view(session, unit, loading=loading)


@router.get("/cities", response_model=CitiesResponse)
def get_cities():
    return CitiesResponse(cities=QUICK_CITIES)


@router.get("/health")
def health():
    return {"ok": True}
