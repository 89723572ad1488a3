"""Normalized weather model shared by every fetcher and consumer.

Provider payloads are decoded into these models at the adapter boundary and
nothing downstream ever sees a raw response. All models are frozen: a search
produces a new ``Session`` snapshot for every stage that completes, and the
orchestrator swaps the whole snapshot in. Temperatures are Celsius
throughout; conversion happens only in ``aether.display``.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _FrozenModel(BaseModel):
    """Base model: immutable, strict about unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class LocationRef(_FrozenModel):
    """A resolved location; fixed for the lifetime of its session."""
    name: str
    country: str
    latitude: float
    longitude: float
    timezone_id: str


class CurrentConditions(_FrozenModel):
    """Snapshot of live (or synthetic) conditions at request time."""
    temperature_c: float
    description: str
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_degree: Optional[float] = None
    wind_dir: Optional[str] = None
    pressure: Optional[float] = None
    cloud_cover: Optional[float] = None
    precipitation: Optional[float] = None
    visibility: Optional[float] = None
    uv_index: Optional[float] = None
    feels_like_c: Optional[float] = None
    is_synthetic: bool = False


class DayRecord(_FrozenModel):
    """One calendar day of the trailing historical window."""
    date: dt.date
    max_temp_c: float
    min_temp_c: float
    avg_temp_c: float
    description: str
    wind_speed: Optional[float] = None
    is_synthetic: bool = False


class AirQualitySample(_FrozenModel):
    """Current air-quality reading; pollutant concentrations in µg/m³."""
    us_aqi: int
    pm10: Optional[float] = None
    pm2_5: Optional[float] = None
    nitrogen_dioxide: Optional[float] = None
    ozone: Optional[float] = None
    sulphur_dioxide: Optional[float] = None


class NoticeKind(str, Enum):
    """User-visible, non-fatal notices attached to a session."""
    DEGRADED_SERVICE = "degraded_service"
    LOCATION_NOT_FOUND = "location_not_found"


class Notice(_FrozenModel):
    """A message the presentation layer should surface to the user."""
    kind: NoticeKind
    message: str
    generation: int = 0


def _normalize_days(days: Optional[Tuple[DayRecord, ...]]) -> Optional[Tuple[DayRecord, ...]]:
    """Sort records oldest-first and reject duplicate dates."""
    if days is None:
        return None
    ordered = tuple(sorted(days, key=lambda d: d.date))
    seen = {d.date for d in ordered}
    if len(seen) != len(ordered):
        raise ValueError("day records must have unique dates")
    return ordered


class Session(_FrozenModel):
    """
    Atomic state bundle for one user-initiated search.

    ``days`` is ``None`` while historical resolution is outstanding; once set
    it is the single record set behind both ``days_ascending`` and
    ``days_descending``. ``air_quality`` may legitimately stay ``None`` after
    ``air_quality_resolved`` becomes true.
    """
    generation: int
    query: str
    location: LocationRef
    current: CurrentConditions
    days: Optional[Tuple[DayRecord, ...]] = None
    air_quality: Optional[AirQualitySample] = None
    air_quality_resolved: bool = False
    notices: Tuple[Notice, ...] = Field(default_factory=tuple)

    @field_validator("days", mode="after")
    @classmethod
    def _check_days(cls, v: Optional[Tuple[DayRecord, ...]]) -> Optional[Tuple[DayRecord, ...]]:
        return _normalize_days(v)

    @property
    def history_resolved(self) -> bool:
        return self.days is not None

    @property
    def is_complete(self) -> bool:
        """True once every stage of the search has published its result."""
        return self.history_resolved and self.air_quality_resolved

    @property
    def days_ascending(self) -> Tuple[DayRecord, ...]:
        """Oldest to newest, for strip display."""
        return self.days or ()

    @property
    def days_descending(self) -> Tuple[DayRecord, ...]:
        """Newest to oldest, for list display."""
        return tuple(reversed(self.days or ()))

    def _replace(self, **changes: Any) -> "Session":
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(changes)
        return type(self)(**values)

    def with_history(self, days) -> "Session":
        """Return a new snapshot carrying the resolved day records."""
        return self._replace(days=tuple(days))

    def with_air_quality(self, sample: Optional[AirQualitySample]) -> "Session":
        """Return a new snapshot with air quality resolved (possibly absent)."""
        return self._replace(air_quality=sample, air_quality_resolved=True)
