"""Synthetic stand-ins for provider data.

Every fallback path draws from ``MockDataGenerator`` so downstream code never
special-cases partial synthetic data: the records are schema-complete, only
the values are random (and bounded). Pass a seeded ``random.Random`` to get
reproducible output.
"""
from __future__ import annotations

import datetime as dt
import random
from typing import Iterable, Optional, Tuple

from aether.domain import CurrentConditions, DayRecord, LocationRef
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="mock_data")

SYNTHETIC_COUNTRY = "Aetheria"
SYNTHETIC_LATITUDE = 35.6895
SYNTHETIC_LONGITUDE = 139.6917
SYNTHETIC_TIMEZONE = "Asia/Tokyo"

CURRENT_DESCRIPTIONS = (
    "Sunny with a chance of Aether",
    "Partly Cloudy",
    "Clear",
    "Overcast",
    "Light Rain",
)
DAY_DESCRIPTIONS = ("Sunny", "Partly Cloudy", "Rain", "Cloudy", "Clear")

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def compass_direction(degree: float) -> str:
    """16-point compass abbreviation for a wind bearing."""
    return COMPASS_POINTS[int((degree % 360) / 22.5 + 0.5) % 16]


class MockDataGenerator:
    """Produce randomized-but-plausible current conditions and day records."""

    def __init__(self, rng: Optional[random.Random] = None, *, seed: Optional[int] = None):
        if rng is None:
            rng = random.Random(seed)
        self.rng = rng

    def location(self, label: str) -> LocationRef:
        """Synthetic location named after the user's query."""
        return LocationRef(
            name=label,
            country=SYNTHETIC_COUNTRY,
            latitude=SYNTHETIC_LATITUDE,
            longitude=SYNTHETIC_LONGITUDE,
            timezone_id=SYNTHETIC_TIMEZONE,
        )

    def current(self, label: str) -> Tuple[LocationRef, CurrentConditions]:
        """Synthetic location and current conditions for ``label``."""
        rng = self.rng
        temperature = rng.randint(8, 30)
        wind_degree = rng.randint(0, 359)
        conditions = CurrentConditions(
            temperature_c=temperature,
            description=rng.choice(CURRENT_DESCRIPTIONS),
            humidity=rng.randint(30, 90),
            wind_speed=rng.randint(0, 30),
            wind_degree=wind_degree,
            wind_dir=compass_direction(wind_degree),
            pressure=rng.randint(995, 1030),
            cloud_cover=rng.randint(0, 100),
            precipitation=round(rng.uniform(0, 5), 1),
            visibility=rng.randint(5, 10),
            uv_index=rng.randint(0, 11),
            feels_like_c=temperature + rng.randint(-3, 3),
            is_synthetic=True,
        )
        logger.debug("Generated synthetic current conditions", extra={"label": label})
        return self.location(label), conditions

    def day(self, date: dt.date, label: str) -> DayRecord:
        """Synthetic record for one calendar day; min < avg-ish < max."""
        rng = self.rng
        max_temp = 25 + rng.randint(0, 9)
        min_temp = 15 + rng.randint(0, 4)
        avg_temp = min(max(20 + rng.randint(0, 6), min_temp), max_temp)
        return DayRecord(
            date=date,
            max_temp_c=max_temp,
            min_temp_c=min_temp,
            avg_temp_c=avg_temp,
            description=rng.choice(DAY_DESCRIPTIONS),
            wind_speed=10 + rng.randint(0, 14),
            is_synthetic=True,
        )

    def days(self, dates: Iterable[dt.date], label: str) -> Tuple[DayRecord, ...]:
        records = tuple(self.day(d, label) for d in dates)
        logger.debug("Generated synthetic day records", extra={"label": label, "count": len(records)})
        return records
