"""Interfaces and helpers for weather data sources."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Callable, List, Protocol

from aether.domain import AirQualitySample, DayRecord


class WeatherDataSource(Protocol):
    """Anything that can answer the three provider questions the fetchers ask."""

    def fetch_current(self, query: str) -> Any:
        """Return the raw current-conditions body from the provider."""
        ...

    def fetch_current_via_relay(self, query: str) -> Any:
        """Return the raw current-conditions body, unwrapped from the relay envelope."""
        ...

    def fetch_archive_days(
        self,
        latitude: float,
        longitude: float,
        start_date: dt.date,
        end_date: dt.date,
    ) -> List[DayRecord]:
        """Return decoded daily records for the inclusive date range."""
        ...

    def fetch_air_quality(self, latitude: float, longitude: float) -> AirQualitySample:
        """Return the current air-quality sample."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap four callables so they can be swapped for different backends."""

    current: Callable[..., Any]
    current_via_relay: Callable[..., Any]
    archive_days: Callable[..., List[DayRecord]]
    air_quality: Callable[..., AirQualitySample]

    def fetch_current(self, query: str) -> Any:
        return self.current(query)

    def fetch_current_via_relay(self, query: str) -> Any:
        return self.current_via_relay(query)

    def fetch_archive_days(self, latitude, longitude, start_date, end_date) -> List[DayRecord]:
        return self.archive_days(latitude, longitude, start_date, end_date)

    def fetch_air_quality(self, latitude, longitude) -> AirQualitySample:
        return self.air_quality(latitude, longitude)
