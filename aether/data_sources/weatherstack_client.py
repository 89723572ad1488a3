"""Current-conditions provider (weatherstack) and the CORS relay that can wrap it."""
from __future__ import annotations

import json
from typing import Any, Optional, Tuple
from urllib.parse import quote, urlencode

from aether import config
from aether.data_sources.http import get_default_session, get_json
from aether.domain import CurrentConditions, LocationRef
from aether.errors import ApplicationError, SchemaError, TransportError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weatherstack_client")

PROVIDER = "weatherstack"
RELAY_PROVIDER = "relay"

# weatherstack error codes meaning "we could not resolve that query"
LOCATION_NOT_FOUND_CODES = {601, 615}


def build_current_url(query: str, settings: config.Settings | None = None) -> str:
    """Full provider URL for ``query``; the relay needs it as one string."""
    settings = settings or config.settings
    params = {"access_key": settings.weatherstack_api_key or "", "query": query}
    return f"{settings.weatherstack_base_url}/current?{urlencode(params)}"


def build_relay_url(target_url: str, settings: config.Settings | None = None) -> str:
    settings = settings or config.settings
    return f"{settings.relay_base_url}/get?url={quote(target_url, safe='')}"


def unwrap_relay_envelope(envelope: Any) -> Any:
    """
    Return the provider payload carried in a relay envelope.

    The relay stringifies the target body into ``contents``. An envelope with
    no ``contents`` key is passed through unchanged; ``contents: null`` means
    the relay itself could not reach the target.
    """
    if not isinstance(envelope, dict) or "contents" not in envelope:
        return envelope
    contents = envelope["contents"]
    if contents is None:
        raise TransportError("relay could not reach the target")
    if not isinstance(contents, str):
        return contents
    try:
        return json.loads(contents)
    except ValueError as exc:
        raise TransportError("relay contents are not valid JSON") from exc


def fetch_current_direct(query: str, *, session=None, settings: config.Settings | None = None) -> Any:
    """Request current conditions straight from the provider."""
    settings = settings or config.settings
    return get_json(
        session or get_default_session(),
        build_current_url(query, settings),
        timeout=settings.request_timeout_seconds,
        provider=PROVIDER,
    )


def fetch_current_via_relay(query: str, *, session=None, settings: config.Settings | None = None) -> Any:
    """Request current conditions through the relay and unwrap the envelope."""
    settings = settings or config.settings
    envelope = get_json(
        session or get_default_session(),
        build_relay_url(build_current_url(query, settings), settings),
        timeout=settings.request_timeout_seconds,
        provider=RELAY_PROVIDER,
    )
    return unwrap_relay_envelope(envelope)


def _require(mapping: Any, key: str, path: str) -> Any:
    if not isinstance(mapping, dict) or mapping.get(key) is None:
        raise SchemaError(path, provider=PROVIDER)
    return mapping[key]


def _as_float(value: Any, path: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise SchemaError(path, provider=PROVIDER) from exc


def _opt_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_current_payload(data: Any) -> Tuple[LocationRef, CurrentConditions]:
    """
    Decode a provider body into the normalized model.

    Raises ``ApplicationError`` for an ``error`` payload and ``SchemaError``
    when a required field is absent.
    """
    if isinstance(data, dict) and data.get("error"):
        err = data["error"]
        if isinstance(err, dict):
            raise ApplicationError(
                str(err.get("info") or "provider error"),
                code=err.get("code"),
                error_type=err.get("type"),
            )
        raise ApplicationError(str(err))

    location = _require(data, "location", "location")
    current = _require(data, "current", "current")

    descriptions = current.get("weather_descriptions") or []
    if not descriptions or not isinstance(descriptions, list):
        raise SchemaError("current.weather_descriptions", provider=PROVIDER)

    location_ref = LocationRef(
        name=str(_require(location, "name", "location.name")),
        country=str(location.get("country") or ""),
        latitude=_as_float(_require(location, "lat", "location.lat"), "location.lat"),
        longitude=_as_float(_require(location, "lon", "location.lon"), "location.lon"),
        timezone_id=str(location.get("timezone_id") or "UTC"),
    )
    conditions = CurrentConditions(
        temperature_c=_as_float(_require(current, "temperature", "current.temperature"), "current.temperature"),
        description=str(descriptions[0]),
        humidity=_opt_float(current.get("humidity")),
        wind_speed=_opt_float(current.get("wind_speed")),
        wind_degree=_opt_float(current.get("wind_degree")),
        wind_dir=current.get("wind_dir"),
        pressure=_opt_float(current.get("pressure")),
        cloud_cover=_opt_float(current.get("cloudcover")),
        precipitation=_opt_float(current.get("precip")),
        visibility=_opt_float(current.get("visibility")),
        uv_index=_opt_float(current.get("uv_index")),
        feels_like_c=_opt_float(current.get("feelslike")),
        is_synthetic=False,
    )
    return location_ref, conditions


def is_location_not_found(error: ApplicationError) -> bool:
    return error.code in LOCATION_NOT_FOUND_CODES
