"""Provider adapters and data source factories."""

from .base import CallableWeatherDataSource, WeatherDataSource
from .factory import build_data_source
from .open_meteo_client import fetch_air_current, fetch_archive_days
from .weatherstack_client import (
    fetch_current_direct,
    fetch_current_via_relay,
    parse_current_payload,
)

__all__ = [
    "build_data_source",
    "WeatherDataSource",
    "CallableWeatherDataSource",
    "fetch_air_current",
    "fetch_archive_days",
    "fetch_current_direct",
    "fetch_current_via_relay",
    "parse_current_payload",
]
