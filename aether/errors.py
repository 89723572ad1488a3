"""Failure taxonomy for provider calls.

Which class is raised decides which fallback step runs next:

- ``TransportError``: the request never reached the provider or never came
  back usable (connection failure, timeout, 5xx, undecodable body). Moves the
  chain to its next step.
- ``ApplicationError``: the provider answered with an explicit error payload.
  Terminal for that provider chain.
- ``SchemaError``: the provider answered, but required fields are missing.
  Handled exactly like ``ApplicationError``.
- ``AirQualityUnavailable``: any air-quality failure. Never user-visible.
"""
from __future__ import annotations

from typing import Optional


class AetherError(Exception):
    """Base class for every error raised by the fetch pipeline."""


class TransportError(AetherError):
    """The provider could not be reached or returned an unusable transport response."""

    def __init__(self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ApplicationError(AetherError):
    """The provider responded with an explicit ``error`` payload."""

    def __init__(self, info: str, *, code: Optional[int] = None, error_type: Optional[str] = None):
        super().__init__(info)
        self.info = info
        self.code = code
        self.error_type = error_type


class SchemaError(AetherError):
    """A response decoded fine but is missing a field the model requires."""

    def __init__(self, field: str, *, provider: str):
        super().__init__(f"{provider} response missing required field '{field}'")
        self.field = field
        self.provider = provider


class AirQualityUnavailable(AetherError):
    """No air-quality sample could be produced for the coordinates."""


class LocationValidationError(ValueError, AetherError):
    """The submitted location query is empty or whitespace."""
