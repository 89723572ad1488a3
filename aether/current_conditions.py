"""Resolve a location query into a LocationRef plus current conditions.

Fallback chain, first success wins:

1. direct provider request;
2. the same request through the CORS relay, but only when step 1 failed at
   the transport level;
3. synthetic data when the provider answered with an error payload or an
   incomplete body (silent, apart from "location not found");
4. synthetic data plus a degraded-service notice for anything else.

``fetch`` never raises and never returns without data.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Tuple

from aether import config
from aether.data_sources.base import WeatherDataSource
from aether.data_sources.weatherstack_client import is_location_not_found, parse_current_payload
from aether.domain import CurrentConditions, LocationRef, Notice, NoticeKind
from aether.errors import ApplicationError, SchemaError, TransportError
from aether.mock_data import MockDataGenerator
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="current_conditions")

DEGRADED_SERVICE_MESSAGE = "Could not reach weather services. Using simulation mode."
LOCATION_NOT_FOUND_MESSAGE = "Could not find '{query}'. Showing simulated weather instead."

SOURCE_DIRECT = "direct"
SOURCE_RELAY = "relay"
SOURCE_SYNTHETIC = "synthetic"


@dataclass(frozen=True)
class CurrentResult:
    """Outcome of the current-conditions stage."""
    location: LocationRef
    current: CurrentConditions
    source: str
    notices: Tuple[Notice, ...] = field(default_factory=tuple)


class CurrentConditionsFetcher:
    """Runs the direct → relay → synthetic chain for one query."""

    def __init__(
        self,
        data_source: WeatherDataSource,
        mock: MockDataGenerator,
        *,
        settings: config.Settings | None = None,
    ):
        self.data_source = data_source
        self.mock = mock
        self.settings = settings or config.settings

    def _request(self, query: str) -> Tuple[Any, str]:
        try:
            return self.data_source.fetch_current(query), SOURCE_DIRECT
        except TransportError as exc:
            logger.warning(
                "Direct current-conditions request failed; retrying via relay",
                extra={"query": query, "error": str(exc)},
            )
        return self.data_source.fetch_current_via_relay(query), SOURCE_RELAY

    def _synthetic(self, query: str, *notices: Notice) -> CurrentResult:
        location, current = self.mock.current(query)
        return CurrentResult(location=location, current=current, source=SOURCE_SYNTHETIC, notices=tuple(notices))

    def fetch(self, query: str, *, generation: int = 0) -> CurrentResult:
        """Resolve ``query``; always returns a location and conditions."""
        query = query.strip()

        if not self.settings.has_weatherstack_key:
            logger.info("No current-conditions API key configured; using synthetic data", extra={"query": query})
            return self._synthetic(query)

        try:
            data, source = self._request(query)
            location, current = parse_current_payload(data)
        except ApplicationError as exc:
            logger.warning(
                "Provider returned an error; falling back to synthetic data",
                extra={"query": query, "code": exc.code, "type": exc.error_type, "info": exc.info},
            )
            if is_location_not_found(exc):
                return self._synthetic(
                    query,
                    Notice(
                        kind=NoticeKind.LOCATION_NOT_FOUND,
                        message=LOCATION_NOT_FOUND_MESSAGE.format(query=query),
                        generation=generation,
                    ),
                )
            return self._synthetic(query)
        except SchemaError as exc:
            logger.warning(
                "Provider response incomplete; falling back to synthetic data",
                extra={"query": query, "field": exc.field},
            )
            return self._synthetic(query)
        except Exception as exc:
            logger.error(
                "Current conditions unavailable; entering simulation mode",
                extra={"query": query, "error": f"{type(exc).__name__}: {exc}"},
            )
            return self._synthetic(
                query,
                Notice(kind=NoticeKind.DEGRADED_SERVICE, message=DEGRADED_SERVICE_MESSAGE, generation=generation),
            )

        logger.info(
            "Resolved current conditions",
            extra={"query": query, "source": source, "location": location.name},
        )
        return CurrentResult(location=location, current=current, source=source)
