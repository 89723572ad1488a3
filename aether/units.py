"""Celsius/Fahrenheit conversion for display sites.

The model only ever stores Celsius. Each display site converts its own
Celsius value; never convert an already-converted number.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Optional


class TemperatureUnit(str, Enum):
    """Display units offered by the unit toggle."""
    CELSIUS = "C"
    FAHRENHEIT = "F"


def round_half_up(value: float) -> int:
    """Round .5 toward +inf, matching the rounding the display has always used."""
    return int(math.floor(value + 0.5))


def to_fahrenheit(celsius: float) -> int:
    """Convert Celsius to a whole-degree Fahrenheit display value."""
    return round_half_up(celsius * 9 / 5 + 32)


def display_temperature(celsius: Optional[float], unit: TemperatureUnit | str) -> Optional[float]:
    """
    Return the value to show for ``celsius`` in ``unit``.

    Celsius is shown as stored. Fahrenheit is converted and rounded here,
    independently for every call site.
    """
    if celsius is None:
        return None
    if TemperatureUnit(unit) is TemperatureUnit.FAHRENHEIT:
        return to_fahrenheit(celsius)
    return celsius
