# src/providers/analytics.py
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport import requests as google_requests
from google.oauth2 import service_account

from errors import UpstreamUnavailable
from providers.base import request_json, require, to_int
from settings import AppSettings

SOURCE = "Google Analytics"
SCOPES = ["https://www.googleapis.com/auth/analytics.readonly"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

REPORT_METRICS = ("activeUsers", "sessions", "screenPageViews")
REPORT_FIELDS = ("active_users_7d", "sessions_7d", "pageviews_7d")

TokenProvider = Callable[[AppSettings], Awaitable[str]]


def report_url(property_id: str) -> str:
    return f"https://analyticsdata.googleapis.com/v1beta/properties/{property_id}:runReport"


def _service_account_token(settings: AppSettings) -> str:
    credentials = service_account.Credentials.from_service_account_info(
        {
            "client_email": settings.ga_client_email,
            # keys stored in .env files carry literal "\n" sequences
            "private_key": settings.ga_private_key.replace("\\n", "\n"),
            "token_uri": TOKEN_URI,
        },
        scopes=SCOPES,
    )
    credentials.refresh(google_requests.Request())
    return credentials.token


async def service_account_token(settings: AppSettings) -> str:
    try:
        return await asyncio.to_thread(_service_account_token, settings)
    except (GoogleAuthError, ValueError, TypeError) as e:
        raise UpstreamUnavailable(SOURCE, f"Google Analytics authorization failed: {e}") from e


def summarize_report(data: Dict[str, Any]) -> Dict[str, int]:
    rows: List[Dict[str, Any]] = data.get("rows") or []
    values = (rows[0].get("metricValues") or []) if rows else []
    summary = {}
    for idx, field in enumerate(REPORT_FIELDS):
        value = values[idx].get("value") if idx < len(values) else 0
        summary[field] = to_int(value or 0)
    return summary


async def fetch_traffic(
    client: httpx.AsyncClient,
    settings: AppSettings,
    token_provider: Optional[TokenProvider] = None,
) -> Dict[str, int]:
    """Active users, sessions and page views for the last seven days."""
    require(
        SOURCE,
        ga_client_email=settings.ga_client_email,
        ga_private_key=settings.ga_private_key,
        ga_property_id=settings.ga_property_id,
    )
    token = await (token_provider or service_account_token)(settings)
    data = await request_json(
        client,
        "POST",
        report_url(settings.ga_property_id),
        source=SOURCE,
        headers={"Authorization": f"Bearer {token}"},
        json={
            "dateRanges": [{"startDate": "7daysAgo", "endDate": "today"}],
            "metrics": [{"name": name} for name in REPORT_METRICS],
        },
    )
    return summarize_report(data)
