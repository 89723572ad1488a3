"""Shared HTTP plumbing: session construction and transport-error translation."""
from __future__ import annotations

import threading
from typing import Any, Mapping, Optional

import requests
import requests_cache
from retry_requests import retry

from aether import config
from aether.errors import TransportError
from utils.logging_utils import get_tagged_logger, mask_url_secrets

logger = get_tagged_logger(__name__, tag="data_sources/http")

_default_session: Optional[requests.Session] = None
_default_session_lock = threading.Lock()


def build_http_session(settings: config.Settings | None = None) -> requests.Session:
    """Create a requests session with retries (and an on-disk cache when enabled)."""
    settings = settings or config.settings
    if settings.http_cache_enabled:
        logger.info(
            "Using requests_cache session",
            extra={"path": settings.http_cache_path, "expire_after": settings.http_cache_expire_seconds},
        )
        base = requests_cache.CachedSession(
            settings.http_cache_path,
            expire_after=settings.http_cache_expire_seconds,
        )
    else:
        base = requests.Session()
    return retry(base, retries=settings.http_retries, backoff_factor=settings.http_backoff_factor)


def get_default_session() -> requests.Session:
    """Process-wide session, built on first use."""
    global _default_session
    with _default_session_lock:
        if _default_session is None:
            _default_session = build_http_session()
        return _default_session


def get_json(
    session,
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    timeout: float,
    provider: str,
) -> Any:
    """
    GET ``url`` and decode its JSON body.

    Raises ``TransportError`` when the request fails, times out, returns a 5xx,
    or returns a body that is not JSON. 4xx bodies are returned as-is so the
    provider adapter can read its own error payload.
    """
    safe_url = mask_url_secrets(url)
    try:
        resp = session.get(url, params=params, timeout=timeout)
    except requests.exceptions.Timeout as exc:
        logger.warning("Provider request timed out", extra={"provider": provider, "url": safe_url})
        raise TransportError(f"{provider} timed out after {timeout}s", url=safe_url) from exc
    except requests.exceptions.RequestException as exc:
        logger.warning(
            "Provider request failed",
            extra={"provider": provider, "url": safe_url, "error": type(exc).__name__},
        )
        raise TransportError(f"{provider} request failed: {type(exc).__name__}", url=safe_url) from exc

    status_code = getattr(resp, "status_code", 200)
    if status_code >= 500:
        raise TransportError(f"{provider} returned HTTP {status_code}", url=safe_url, status_code=status_code)

    try:
        data = resp.json()
    except ValueError as exc:
        raise TransportError(f"{provider} returned a non-JSON body", url=safe_url, status_code=status_code) from exc

    logger.debug("Provider responded", extra={"provider": provider, "url": safe_url, "status": status_code})
    return data
