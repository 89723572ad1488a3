"""Helpers for fetching historical and air-quality data from the Open-Meteo APIs."""
from __future__ import annotations

import datetime as dt
from typing import Any, List, Mapping

from aether import config
from aether.conditions import describe_weather_code
from aether.data_sources.http import get_default_session, get_json
from aether.domain import AirQualitySample, DayRecord
from aether.errors import ApplicationError, SchemaError
from aether.units import round_half_up
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="open_meteo_client")

ARCHIVE_PROVIDER = "open_meteo_archive"
AIR_PROVIDER = "open_meteo_air_quality"

ARCHIVE_DAILY_VARS = [
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "temperature_2m_mean",
]

AIR_CURRENT_VARS = [
    "us_aqi",
    "pm10",
    "pm2_5",
    "nitrogen_dioxide",
    "ozone",
    "sulphur_dioxide",
]

EXPECTED_DAILY_UNITS = {
    "temperature_2m_max": "°C",
    "temperature_2m_min": "°C",
    "temperature_2m_mean": "°C",
    "weather_code": "wmo code",
}

EXPECTED_AIR_UNITS = {
    "us_aqi": "USAQI",
    "pm10": "μg/m³",
    "pm2_5": "μg/m³",
    "nitrogen_dioxide": "μg/m³",
    "ozone": "μg/m³",
    "sulphur_dioxide": "μg/m³",
}

# Localized or encoding variants that should not trigger warnings.
ALLOWED_UNIT_SYNONYMS = {
    "temperature_2m_max": {"°C", "C"},
    "temperature_2m_min": {"°C", "C"},
    "temperature_2m_mean": {"°C", "C"},
    "weather_code": {"wmo code", "code", ""},
    "us_aqi": {"USAQI", "aqi", "US AQI"},
    "pm10": {"μg/m³", "µg/m³", "ug/m3"},
    "pm2_5": {"μg/m³", "µg/m³", "ug/m3"},
    "nitrogen_dioxide": {"μg/m³", "µg/m³", "ug/m3"},
    "ozone": {"μg/m³", "µg/m³", "ug/m3"},
    "sulphur_dioxide": {"μg/m³", "µg/m³", "ug/m3"},
}


def _warn_on_unexpected_units(units: Mapping[str, Any] | None, expected: Mapping[str, str], *, context: str):
    """Log a warning if Open-Meteo returns units we did not request/expect."""
    if not units:
        return
    for field, want in expected.items():
        actual = units.get(field)
        if actual is None or actual == want:
            continue
        allowed = ALLOWED_UNIT_SYNONYMS.get(field, set())
        if actual not in allowed:
            logger.warning(
                "Unexpected Open-Meteo unit",
                extra={"context": context, "field": field, "unit": actual, "expected": want},
            )


def _whole_number(value: Any, field: str, provider: str) -> int:
    try:
        return round_half_up(float(value))
    except (TypeError, ValueError) as exc:
        raise SchemaError(field, provider=provider) from exc


def _raise_for_error_payload(data: Any, provider: str) -> None:
    """Open-Meteo reports bad requests as ``{"error": true, "reason": "..."}``."""
    if isinstance(data, dict) and data.get("error"):
        raise ApplicationError(str(data.get("reason") or "provider error"), error_type=provider)


def decode_daily(daily: Any) -> List[DayRecord]:
    """
    Turn Open-Meteo's parallel daily arrays into one ``DayRecord`` per date.

    Days whose temperatures are still null (the archive lags a few days
    behind real time) are skipped; the caller fills the gap.
    """
    if not isinstance(daily, dict):
        raise SchemaError("daily", provider=ARCHIVE_PROVIDER)
    times = daily.get("time")
    if not isinstance(times, list):
        raise SchemaError("daily.time", provider=ARCHIVE_PROVIDER)

    columns = {}
    for var in ARCHIVE_DAILY_VARS:
        values = daily.get(var)
        if not isinstance(values, list) or len(values) != len(times):
            raise SchemaError(f"daily.{var}", provider=ARCHIVE_PROVIDER)
        columns[var] = values

    out: List[DayRecord] = []
    for i, raw_date in enumerate(times):
        try:
            date = dt.date.fromisoformat(str(raw_date))
        except ValueError as exc:
            raise SchemaError("daily.time", provider=ARCHIVE_PROVIDER) from exc

        t_max = columns["temperature_2m_max"][i]
        t_min = columns["temperature_2m_min"][i]
        t_mean = columns["temperature_2m_mean"][i]
        if t_max is None or t_min is None or t_mean is None:
            logger.debug("Skipping archive day with null temperatures", extra={"date": date.isoformat()})
            continue

        out.append(
            DayRecord(
                date=date,
                max_temp_c=_whole_number(t_max, "daily.temperature_2m_max", ARCHIVE_PROVIDER),
                min_temp_c=_whole_number(t_min, "daily.temperature_2m_min", ARCHIVE_PROVIDER),
                avg_temp_c=_whole_number(t_mean, "daily.temperature_2m_mean", ARCHIVE_PROVIDER),
                description=describe_weather_code(columns["weather_code"][i]),
                wind_speed=None,
                is_synthetic=False,
            )
        )
    return out


def fetch_archive_days(
    latitude: float,
    longitude: float,
    start_date: dt.date,
    end_date: dt.date,
    *,
    session=None,
    settings: config.Settings | None = None,
) -> List[DayRecord]:
    """Fetch daily archive records for the inclusive range [start_date, end_date]."""
    settings = settings or config.settings
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "daily": ",".join(ARCHIVE_DAILY_VARS),
        "timezone": "auto",
    }

    data = get_json(
        session or get_default_session(),
        f"{settings.archive_base_url}/archive",
        params=params,
        timeout=settings.request_timeout_seconds,
        provider=ARCHIVE_PROVIDER,
    )
    _raise_for_error_payload(data, ARCHIVE_PROVIDER)
    if not isinstance(data, dict) or "daily" not in data:
        raise SchemaError("daily", provider=ARCHIVE_PROVIDER)
    _warn_on_unexpected_units(data.get("daily_units"), EXPECTED_DAILY_UNITS, context="archive_daily")

    return decode_daily(data["daily"])


def fetch_air_current(
    latitude: float,
    longitude: float,
    *,
    session=None,
    settings: config.Settings | None = None,
) -> AirQualitySample:
    """Fetch the latest air-quality observation for the given coordinates."""
    settings = settings or config.settings
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current": ",".join(AIR_CURRENT_VARS),
        "timezone": "auto",
    }

    data = get_json(
        session or get_default_session(),
        f"{settings.air_quality_base_url}/air-quality",
        params=params,
        timeout=settings.request_timeout_seconds,
        provider=AIR_PROVIDER,
    )
    _raise_for_error_payload(data, AIR_PROVIDER)
    current = data.get("current") if isinstance(data, dict) else None
    if not isinstance(current, dict):
        raise SchemaError("current", provider=AIR_PROVIDER)
    if current.get("us_aqi") is None:
        raise SchemaError("current.us_aqi", provider=AIR_PROVIDER)
    _warn_on_unexpected_units(data.get("current_units"), EXPECTED_AIR_UNITS, context="air_current")

    return AirQualitySample(
        us_aqi=_whole_number(current["us_aqi"], "current.us_aqi", AIR_PROVIDER),
        pm10=current.get("pm10"),
        pm2_5=current.get("pm2_5"),
        nitrogen_dioxide=current.get("nitrogen_dioxide"),
        ozone=current.get("ozone"),
        sulphur_dioxide=current.get("sulphur_dioxide"),
    )
