"""Current air quality for resolved coordinates.

Unlike the other stages there is no synthetic fallback: a failed lookup
leaves the sample absent, and absence is a normal state.
"""
from __future__ import annotations

from typing import Optional

from aether.data_sources.base import WeatherDataSource
from aether.domain import AirQualitySample
from aether.errors import AirQualityUnavailable
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="air_quality")


class AirQualityFetcher:
    def __init__(self, data_source: WeatherDataSource):
        self.data_source = data_source

    def resolve(self, latitude: float, longitude: float) -> AirQualitySample:
        """Return the sample or raise ``AirQualityUnavailable``."""
        try:
            return self.data_source.fetch_air_quality(latitude, longitude)
        except Exception as exc:
            raise AirQualityUnavailable(f"{type(exc).__name__}: {exc}") from exc

    def fetch(self, latitude: float, longitude: float) -> Optional[AirQualitySample]:
        """Return the sample, or ``None`` when it cannot be resolved."""
        try:
            sample = self.resolve(latitude, longitude)
        except AirQualityUnavailable as exc:
            logger.info(
                "Air quality unavailable",
                extra={"latitude": latitude, "longitude": longitude, "error": str(exc)},
            )
            return None
        logger.info("Resolved air quality", extra={"us_aqi": sample.us_aqi})
        return sample
