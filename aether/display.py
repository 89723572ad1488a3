"""Display-ready views of a Session.

This is the only place Celsius values are converted. Each view field is
converted from the stored Celsius value on its own, so toggling C→F→C shows
exactly the stored number again.
"""
from __future__ import annotations

import datetime as dt
import math
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel

from aether.conditions import (
    ThemeCondition,
    aqi_gauge_fraction,
    aqi_label,
    classify_condition,
    feels_like_phrase,
    uv_label,
)
from aether.domain import AirQualitySample, CurrentConditions, DayRecord, LocationRef, Notice, Session
from aether.units import TemperatureUnit, display_temperature
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="display")

HOURLY_OFFSETS = range(-4, 9)
QUICK_CITIES = ["London", "Tokyo", "New York", "Paris", "Sydney", "Dubai"]


class CurrentView(BaseModel):
    """Current conditions in the requested display unit."""
    temperature: float
    feels_like: Optional[float] = None
    feels_like_phrase: str
    description: str
    theme: ThemeCondition
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_degree: Optional[float] = None
    wind_dir: Optional[str] = None
    pressure: Optional[float] = None
    cloud_cover: Optional[float] = None
    precipitation: Optional[float] = None
    visibility: Optional[float] = None
    uv_index: Optional[float] = None
    uv_label: Optional[str] = None
    is_synthetic: bool


class DayView(BaseModel):
    date: dt.date
    weekday: str
    max_temp: float
    min_temp: float
    avg_temp: float
    description: str
    theme: ThemeCondition
    wind_speed: Optional[float] = None
    is_synthetic: bool


class HistoryView(BaseModel):
    ascending: List[DayView]
    descending: List[DayView]


class AirQualityView(BaseModel):
    us_aqi: int
    label: str
    gauge: float
    pm10: Optional[float] = None
    pm2_5: Optional[float] = None
    nitrogen_dioxide: Optional[float] = None
    ozone: Optional[float] = None
    sulphur_dioxide: Optional[float] = None


class HourView(BaseModel):
    label: str
    temperature: float
    is_now: bool


class SessionView(BaseModel):
    """Everything the presentation layer needs for one render."""
    generation: int
    query: str
    unit: TemperatureUnit
    loading: bool
    complete: bool
    location: LocationRef
    current: CurrentView
    hourly: List[HourView]
    history: Optional[HistoryView] = None
    air_quality: Optional[AirQualityView] = None
    notices: List[Notice]


def current_view(current: CurrentConditions, unit: TemperatureUnit | str) -> CurrentView:
    return CurrentView(
        temperature=display_temperature(current.temperature_c, unit),
        feels_like=display_temperature(current.feels_like_c, unit),
        feels_like_phrase=feels_like_phrase(current.temperature_c, current.feels_like_c),
        description=current.description,
        theme=classify_condition(current.description),
        humidity=current.humidity,
        wind_speed=current.wind_speed,
        wind_degree=current.wind_degree,
        wind_dir=current.wind_dir,
        pressure=current.pressure,
        cloud_cover=current.cloud_cover,
        precipitation=current.precipitation,
        visibility=current.visibility,
        uv_index=current.uv_index,
        uv_label=uv_label(current.uv_index) if current.uv_index is not None else None,
        is_synthetic=current.is_synthetic,
    )


def day_view(day: DayRecord, unit: TemperatureUnit | str) -> DayView:
    return DayView(
        date=day.date,
        weekday=day.date.strftime("%a"),
        max_temp=display_temperature(day.max_temp_c, unit),
        min_temp=display_temperature(day.min_temp_c, unit),
        avg_temp=display_temperature(day.avg_temp_c, unit),
        description=day.description,
        theme=classify_condition(day.description),
        wind_speed=day.wind_speed,
        is_synthetic=day.is_synthetic,
    )


def air_quality_view(sample: Optional[AirQualitySample]) -> Optional[AirQualityView]:
    """None stays None: the client renders its placeholder."""
    if sample is None:
        return None
    return AirQualityView(
        us_aqi=sample.us_aqi,
        label=aqi_label(sample.us_aqi),
        gauge=aqi_gauge_fraction(sample.us_aqi),
        pm10=sample.pm10,
        pm2_5=sample.pm2_5,
        nitrogen_dioxide=sample.nitrogen_dioxide,
        ozone=sample.ozone,
        sulphur_dioxide=sample.sulphur_dioxide,
    )


def _hour_label(hour: int) -> str:
    return f"{hour % 12 or 12}{'PM' if hour >= 12 else 'AM'}"


def hourly_projection(base_temp_c: float, unit: TemperatureUnit | str, current_hour: int) -> List[HourView]:
    """
    A smooth 13-hour strip around ``current_hour`` derived from the current
    temperature; offsets -4..+8, with offset 0 marked as now.
    """
    out: List[HourView] = []
    for offset in HOURLY_OFFSETS:
        hour = (current_hour + offset + 24) % 24
        temp_c = base_temp_c + math.floor(math.sin(offset / 2) * 5 + 0.5)
        out.append(HourView(label=_hour_label(hour), temperature=display_temperature(temp_c, unit), is_now=offset == 0))
    return out


def local_hour(timezone_id: str, now: Optional[dt.datetime] = None) -> int:
    """Hour of day at the location, falling back to UTC for unknown zones."""
    now = now or dt.datetime.now(dt.timezone.utc)
    try:
        tz = ZoneInfo(timezone_id)
    except (ZoneInfoNotFoundError, ValueError):
        logger.debug("Unknown timezone; using UTC", extra={"timezone_id": timezone_id})
        tz = dt.timezone.utc
    return now.astimezone(tz).hour


def session_view(
    session: Session,
    unit: TemperatureUnit | str = TemperatureUnit.CELSIUS,
    *,
    loading: bool = False,
    now: Optional[dt.datetime] = None,
) -> SessionView:
    unit = TemperatureUnit(unit)
    history = None
    if session.history_resolved:
        history = HistoryView(
            ascending=[day_view(d, unit) for d in session.days_ascending],
            descending=[day_view(d, unit) for d in session.days_descending],
        )
    return SessionView(
        generation=session.generation,
        query=session.query,
        unit=unit,
        loading=loading,
        complete=session.is_complete,
        location=session.location,
        current=current_view(session.current, unit),
        hourly=hourly_projection(
            session.current.temperature_c,
            unit,
            local_hour(session.location.timezone_id, now),
        ),
        history=history,
        air_quality=air_quality_view(session.air_quality),
        notices=list(session.notices),
    )
