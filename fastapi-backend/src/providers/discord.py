# src/providers/discord.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from providers.base import request_json, require, to_int
from settings import AppSettings

logger = logging.getLogger(__name__)

SOURCE = "Discord"
API_BASE = "https://discord.com/api/v10"

# response field -> insights series
INSIGHT_SERIES = {
    "new_members_7d": "members_joined",
    "messages_7d": "messages_sent",
    "active_members_7d": "communicators",
    "voice_participants_7d": "voice_participants",
}


def _sum_series(series: Optional[List[Dict[str, Any]]]) -> Optional[int]:
    if not series or not isinstance(series, list):
        return None
    # non-numeric day values count as 0
    return sum(to_int(day.get("value")) for day in series if isinstance(day, dict))


def summarize_insights(data: Dict[str, Any]) -> Dict[str, Optional[int]]:
    return {field: _sum_series(data.get(series)) for field, series in INSIGHT_SERIES.items()}


async def fetch_guild_stats(
    client: httpx.AsyncClient, settings: AppSettings
) -> Dict[str, Optional[int]]:
    require(
        SOURCE,
        discord_guild_id=settings.discord_guild_id,
        discord_bot_token=settings.discord_bot_token,
    )
    headers = {"Authorization": f"Bot {settings.discord_bot_token}"}
    guild_id = settings.discord_guild_id

    guild = await request_json(
        client,
        "GET",
        f"{API_BASE}/guilds/{guild_id}",
        source=SOURCE,
        headers=headers,
        params={"with_counts": "true"},
    )

    insights: Dict[str, Optional[int]] = {field: None for field in INSIGHT_SERIES}
    try:
        r = await client.get(
            f"{API_BASE}/guilds/{guild_id}/insights/member-insights",
            headers=headers,
            params={"interval": 7},
        )
    except httpx.HTTPError as e:
        logger.warning("Discord insights request failed: %s", e)
    else:
        if r.is_success:
            try:
                data = r.json()
            except ValueError:
                data = None
            if isinstance(data, dict):
                insights = summarize_insights(data)
            else:
                logger.warning("Discord insights returned an undecodable body")
        else:
            logger.info("Insights not available (requires 500+ members or Community server)")

    return {
        "online": guild.get("approximate_presence_count"),
        "total_members": guild.get("approximate_member_count"),
        **insights,
    }
