# src/providers/youtube.py
from __future__ import annotations

from typing import Dict

import httpx

from errors import UpstreamUnavailable
from providers.base import request_json, require, to_int
from settings import AppSettings

SOURCE = "YouTube"
CHANNELS_URL = "https://www.googleapis.com/youtube/v3/channels"


async def fetch_channel_stats(client: httpx.AsyncClient, settings: AppSettings) -> Dict[str, int]:
    require(SOURCE, youtube_api_key=settings.youtube_key, youtube_channel_id=settings.youtube_channel_id)
    data = await request_json(
        client,
        "GET",
        CHANNELS_URL,
        source=SOURCE,
        params={"part": "statistics", "id": settings.youtube_channel_id, "key": settings.youtube_key},
    )
    if data.get("error"):
        error = data["error"]
        raise UpstreamUnavailable(SOURCE, error.get("message") if isinstance(error, dict) else str(error))
    items = data.get("items") or []
    if not items:
        raise UpstreamUnavailable(SOURCE, "Channel not found")

    stats = items[0].get("statistics") or {}
    subscribers = to_int(stats.get("subscriberCount"))
    return {
        "current": subscribers,
        "subscribers": subscribers,
        "views": to_int(stats.get("viewCount")),
        "videos": to_int(stats.get("videoCount")),
    }
