"""Factory helpers for choosing a weather data source at startup."""

from __future__ import annotations

from functools import partial

from aether import config
from aether.data_sources.base import CallableWeatherDataSource, WeatherDataSource
from aether.data_sources.http import build_http_session
from aether.data_sources.open_meteo_client import fetch_air_current, fetch_archive_days
from aether.data_sources.weatherstack_client import fetch_current_direct, fetch_current_via_relay
from aether.errors import TransportError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "live"


def _offline(*_args, **_kwargs):
    raise TransportError("offline data source")


def build_data_source(settings: config.Settings | None = None, *, session=None) -> WeatherDataSource:
    """Instantiate the configured data source."""
    settings = settings or config.settings
    source = (settings.data_source or DEFAULT_SOURCE_NAME).lower()

    if source == "live":
        session = session or build_http_session(settings)
        logger.info("Using live provider data source")
        return CallableWeatherDataSource(
            current=partial(fetch_current_direct, session=session, settings=settings),
            current_via_relay=partial(fetch_current_via_relay, session=session, settings=settings),
            archive_days=partial(fetch_archive_days, session=session, settings=settings),
            air_quality=partial(fetch_air_current, session=session, settings=settings),
        )

    if source == "offline":
        logger.info("Using offline data source; every stage will fall back")
        return CallableWeatherDataSource(
            current=_offline,
            current_via_relay=_offline,
            archive_days=_offline,
            air_quality=_offline,
        )

    raise ValueError(f"Unknown data source '{source}'")
