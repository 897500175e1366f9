# src/providers/base.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from errors import ProviderNotConfigured, UpstreamUnavailable
from settings import AppSettings

logger = logging.getLogger(__name__)


def create_client(settings: AppSettings) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.http_timeout)


def require(source: str, **values: Optional[str]) -> None:
    """Raise ProviderNotConfigured naming every missing setting."""
    missing = [name.upper() for name, value in values.items() if not value]
    if missing:
        raise ProviderNotConfigured(source, f"Missing {source} configuration: {', '.join(missing)}")


def _error_message(payload: Any) -> Optional[str]:
    """Pull a human readable message out of the error shapes the providers use."""
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    errors = payload.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        if errors[0].get("message"):
            return str(errors[0]["message"])
    for key in ("detail", "message", "title"):
        if payload.get(key):
            return str(payload[key])
    return None


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    source: str,
    **kwargs: Any,
) -> Dict[str, Any]:
    """
    Perform one upstream request and return the decoded JSON object.

    Transport failures, non-2xx statuses and undecodable bodies are all
    raised as UpstreamUnavailable carrying the upstream's message.
    """
    try:
        r = await client.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        logger.error("%s request failed: %s", source, e)
        raise UpstreamUnavailable(source, f"{source} unreachable: {e}") from e

    try:
        payload = r.json()
    except ValueError:
        payload = None

    if r.is_error:
        message = _error_message(payload) or f"{source} returned HTTP {r.status_code}"
        logger.error("%s API error (%s): %s", source, r.status_code, message)
        raise UpstreamUnavailable(source, message)

    if not isinstance(payload, dict):
        raise UpstreamUnavailable(source, f"{source} returned an unexpected response body")
    return payload


def to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
