"""Session lifecycle: one search in, one immutable Session snapshot stream out.

``submit`` bumps the generation token and schedules the search on a thread
pool. Current conditions resolve first; once coordinates are known, history
and air quality resolve concurrently and independently. Every stage result is
merged into a fresh ``Session`` snapshot, and the snapshot is swapped in only
if the stage's generation still matches the orchestrator's. Results from a
superseded search are dropped, never merged.

The state lock only covers the compare-and-swap of the snapshot reference;
no network call ever runs while it is held. Each committed snapshot gets a
sequence number, and ``on_session`` subscribers see snapshots in commit order
(a snapshot overtaken by a newer delivery is skipped, never delivered late).
"""
from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import Callable, Optional

from aether import config
from aether.air_quality import AirQualityFetcher
from aether.current_conditions import CurrentConditionsFetcher
from aether.data_sources import build_data_source
from aether.data_sources.base import WeatherDataSource
from aether.domain import Notice, Session
from aether.errors import LocationValidationError
from aether.historical import HistoricalRangeFetcher
from aether.mock_data import MockDataGenerator
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="orchestrator")

NoticeCallback = Callable[[Notice], None]
SessionCallback = Callable[[Session], None]


class _StageTracker:
    """Counts outstanding background stages of one generation."""

    def __init__(self, remaining: int, done: "Future[Optional[Session]]"):
        self.remaining = remaining
        self.done = done


class FetchOrchestrator:
    """Owns the current Session and sequences the fetch stages for each search."""

    def __init__(
        self,
        current_fetcher: CurrentConditionsFetcher,
        historical_fetcher: HistoricalRangeFetcher,
        air_quality_fetcher: AirQualityFetcher,
        *,
        executor: Optional[ThreadPoolExecutor] = None,
        max_workers: int = 4,
        on_notice: Optional[NoticeCallback] = None,
        on_session: Optional[SessionCallback] = None,
    ):
        self._current = current_fetcher
        self._historical = historical_fetcher
        self._air_quality = air_quality_fetcher
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="aether-fetch")
        self._on_notice = on_notice
        self._on_session = on_session

        self._lock = threading.Lock()
        self._delivery_lock = threading.Lock()
        self._generation = 0
        self._sequence = 0
        self._delivered_sequence = 0
        self._session: Optional[Session] = None
        self._loading = False

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def session(self) -> Optional[Session]:
        """The committed snapshot for the latest search, or None while it loads."""
        with self._lock:
            return self._session

    @property
    def loading(self) -> bool:
        """True only while current conditions for the latest search are outstanding."""
        with self._lock:
            return self._loading

    def submit(self, location_query: str) -> "Future[Optional[Session]]":
        """
        Start a new search.

        Raises ``LocationValidationError`` for blank input without touching
        the current session. Otherwise returns a future that resolves to the
        completed Session, or to ``None`` if a newer search superseded this one.
        """
        query = (location_query or "").strip()
        if not query:
            raise LocationValidationError("Please enter a location.")

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._session = None
            self._loading = True

        logger.info("Search submitted", extra={"query": query, "generation": generation})
        done: "Future[Optional[Session]]" = Future()
        self._executor.submit(self._resolve_current, generation, query, done)
        return done

    def _commit(
        self,
        generation: int,
        update: Callable[[Optional[Session]], Session],
        *,
        finish_loading: bool = False,
    ) -> Optional[Session]:
        """Swap in ``update(current_snapshot)`` if ``generation`` is still current."""
        with self._lock:
            if generation != self._generation:
                logger.debug(
                    "Discarding superseded result",
                    extra={"generation": generation, "current_generation": self._generation},
                )
                return None
            snapshot = update(self._session)
            self._session = snapshot
            self._sequence += 1
            sequence = self._sequence
            if finish_loading:
                self._loading = False

        self._deliver(sequence, snapshot)
        return snapshot

    def _deliver(self, sequence: int, snapshot: Session) -> None:
        """Hand ``snapshot`` to the subscriber unless a newer one already went out."""
        if not self._on_session:
            return
        with self._delivery_lock:
            if sequence <= self._delivered_sequence:
                logger.debug("Skipping overtaken snapshot", extra={"generation": snapshot.generation})
                return
            self._delivered_sequence = sequence
            try:
                self._on_session(snapshot)
            except Exception:
                logger.exception("Session subscriber failed", extra={"generation": snapshot.generation})

    def _publish_notice(self, notice: Notice) -> None:
        if not self._on_notice:
            return
        try:
            self._on_notice(notice)
        except Exception:
            logger.exception("Notice subscriber failed", extra={"kind": notice.kind.value})

    def _resolve_current(self, generation: int, query: str, done: "Future[Optional[Session]]") -> None:
        if generation != self.generation:
            logger.debug("Skipping superseded search before any request", extra={"generation": generation})
            done.set_result(None)
            return
        try:
            self._run_current(generation, query, done)
        except Exception as exc:
            logger.exception("Current-conditions stage failed", extra={"query": query, "generation": generation})
            with self._lock:
                if generation == self._generation:
                    self._loading = False
            if not done.done():
                done.set_exception(exc)

    def _run_current(self, generation: int, query: str, done: "Future[Optional[Session]]") -> None:
        result = self._current.fetch(query, generation=generation)
        base = Session(
            generation=generation,
            query=query,
            location=result.location,
            current=result.current,
            notices=result.notices,
        )
        if self._commit(generation, lambda _old: base, finish_loading=True) is None:
            done.set_result(None)
            return

        logger.info(
            "Committed current conditions",
            extra={"generation": generation, "source": result.source, "location": result.location.name},
        )
        for notice in result.notices:
            self._publish_notice(notice)

        lat, lon = result.location.latitude, result.location.longitude
        tracker = _StageTracker(remaining=2, done=done)
        history = self._executor.submit(self._historical.fetch, lat, lon, query)
        history.add_done_callback(partial(self._on_history, generation, query, tracker))
        air = self._executor.submit(self._air_quality.fetch, lat, lon)
        air.add_done_callback(partial(self._on_air_quality, generation, tracker))

    def _on_history(self, generation: int, query: str, tracker: _StageTracker, future: Future) -> None:
        try:
            days = future.result()
        except Exception:
            logger.exception("History stage escaped its fallback; synthesizing", extra={"generation": generation})
            days = self._historical.synthesize(self._historical.window(), query)
        try:
            self._commit(generation, lambda s: s.with_history(days))
        finally:
            self._stage_finished(generation, tracker)

    def _on_air_quality(self, generation: int, tracker: _StageTracker, future: Future) -> None:
        try:
            sample = future.result()
        except Exception:
            logger.exception("Air-quality stage escaped its fallback", extra={"generation": generation})
            sample = None
        try:
            self._commit(generation, lambda s: s.with_air_quality(sample))
        finally:
            self._stage_finished(generation, tracker)

    def _stage_finished(self, generation: int, tracker: _StageTracker) -> None:
        with self._lock:
            tracker.remaining -= 1
            if tracker.remaining:
                return
            final = self._session if generation == self._generation else None
        if final is not None:
            logger.info("Session complete", extra={"generation": generation})
        tracker.done.set_result(final)

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> "FetchOrchestrator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()


def build_orchestrator(
    settings: config.Settings | None = None,
    *,
    data_source: Optional[WeatherDataSource] = None,
    mock: Optional[MockDataGenerator] = None,
    on_notice: Optional[NoticeCallback] = None,
    on_session: Optional[SessionCallback] = None,
) -> FetchOrchestrator:
    """Wire fetchers, data source and mock generator from settings."""
    settings = settings or config.settings
    data_source = data_source or build_data_source(settings)
    mock = mock or MockDataGenerator(seed=settings.mock_seed)
    return FetchOrchestrator(
        CurrentConditionsFetcher(data_source, mock, settings=settings),
        HistoricalRangeFetcher(data_source, mock, settings=settings),
        AirQualityFetcher(data_source),
        max_workers=settings.max_workers,
        on_notice=on_notice,
        on_session=on_session,
    )
