"""Text and code vocabularies: theme classification, weather codes, AQI/UV labels."""
from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence, Tuple


class ThemeCondition(str, Enum):
    """Theme buckets the presentation layer styles itself by."""
    RAIN = "Rain"
    STORM = "Storm"
    SUNNY = "Sunny"
    SNOW = "Snow"
    DEFAULT = "Default"


# Order matters: first matching group wins ("thunderstorm with rain" is Rain).
CONDITION_KEYWORDS: Sequence[Tuple[ThemeCondition, Tuple[str, ...]]] = (
    (ThemeCondition.RAIN, ("rain", "drizzle")),
    (ThemeCondition.STORM, ("thunder", "storm")),
    (ThemeCondition.SUNNY, ("sun", "clear")),
    (ThemeCondition.SNOW, ("snow", "ice", "blizzard")),
)


def classify_condition(description: Optional[str]) -> ThemeCondition:
    """Map a free-text weather description to a theme bucket."""
    text = (description or "").lower()
    for condition, keywords in CONDITION_KEYWORDS:
        if any(k in text for k in keywords):
            return condition
    return ThemeCondition.DEFAULT


WEATHER_CODE_DESCRIPTIONS = {
    0: "Sunny",
    1: "Partly Cloudy",
    2: "Partly Cloudy",
    3: "Partly Cloudy",
    45: "Fog",
    48: "Fog",
    51: "Drizzle",
    53: "Drizzle",
    55: "Drizzle",
    61: "Rain",
    63: "Rain",
    65: "Rain",
    80: "Rain",
    81: "Rain",
    82: "Rain",
    71: "Snow",
    73: "Snow",
    75: "Snow",
    77: "Snow",
    85: "Snow",
    86: "Snow",
    95: "Thunderstorm",
    96: "Thunderstorm",
    99: "Thunderstorm",
}
UNKNOWN_WEATHER_CODE_DESCRIPTION = "Cloudy"


def describe_weather_code(code: Optional[int]) -> str:
    """Translate a WMO weather code into the short description the app displays."""
    if code is None:
        return UNKNOWN_WEATHER_CODE_DESCRIPTION
    try:
        key = int(code)
    except (TypeError, ValueError):
        return UNKNOWN_WEATHER_CODE_DESCRIPTION
    # 61.5 is not 61
    if key != code:
        return UNKNOWN_WEATHER_CODE_DESCRIPTION
    return WEATHER_CODE_DESCRIPTIONS.get(key, UNKNOWN_WEATHER_CODE_DESCRIPTION)


AQI_BANDS: Sequence[Tuple[int, str]] = (
    (50, "Good"),
    (100, "Moderate"),
    (150, "Unhealthy (Sensitive)"),
    (200, "Unhealthy"),
    (300, "Very Unhealthy"),
)
AQI_GAUGE_MAX = 300


def aqi_label(us_aqi: float) -> str:
    """US AQI category name."""
    for upper, label in AQI_BANDS:
        if us_aqi <= upper:
            return label
    return "Hazardous"


def aqi_gauge_fraction(us_aqi: float) -> float:
    """Fill fraction for the AQI gauge, capped at 1."""
    return min(1.0, max(0.0, us_aqi / AQI_GAUGE_MAX))


UV_BANDS: Sequence[Tuple[float, str]] = (
    (2, "Low"),
    (5, "Medium"),
    (7, "High"),
    (10, "Very High"),
)


def uv_label(uv_index: float) -> str:
    for upper, label in UV_BANDS:
        if uv_index <= upper:
            return label
    return "Extreme"


def feels_like_phrase(temperature_c: float, feels_like_c: Optional[float]) -> str:
    """Short comparison of perceived vs. measured temperature."""
    if feels_like_c is None or feels_like_c == temperature_c:
        return "Feels about right"
    if feels_like_c > temperature_c:
        return "Feels warmer than it is"
    return "Feels colder than it is"
