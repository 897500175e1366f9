# src/reports/platforms.py
# | Endpoint        | Upstream                 | Data shown                                      |
# | --------------- | ------------------------ | ----------------------------------------------- |
# | /api/youtube    | YouTube Data API v3      | subscribers, total views, video count           |
# | /api/mailchimp  | Mailchimp Marketing 3.0  | audience member count                           |
# | /api/discord    | Discord API v10          | online / total members, 7-day member insights   |
# | /api/analytics  | GA4 Data API (v1beta)    | 7-day active users, sessions, page views        |
from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends

from dependencies import get_http_client
from providers.analytics import fetch_traffic
from providers.discord import fetch_guild_stats
from providers.mailchimp import fetch_list_stats
from providers.youtube import fetch_channel_stats
from schemas import AnalyticsMetrics, DiscordMetrics, MailchimpMetrics, YoutubeMetrics
from settings import AppSettings, get_settings

router = APIRouter(prefix="/api", tags=["platforms"])


@router.get("/youtube", response_model=YoutubeMetrics)
async def youtube_metrics(
    settings: AppSettings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await fetch_channel_stats(client, settings)


@router.get("/mailchimp", response_model=MailchimpMetrics)
async def mailchimp_metrics(
    settings: AppSettings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await fetch_list_stats(client, settings)


@router.get("/discord", response_model=DiscordMetrics)
async def discord_metrics(
    settings: AppSettings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await fetch_guild_stats(client, settings)


@router.get("/analytics", response_model=AnalyticsMetrics)
async def analytics_metrics(
    settings: AppSettings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await fetch_traffic(client, settings)
