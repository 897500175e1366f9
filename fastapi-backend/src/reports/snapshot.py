# src/reports/snapshot.py
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException

from dependencies import get_snapshot_store
from economics.retention import compute_retention
from economics.revenue import compute_revenue
from errors import InvalidSnapshot, ProviderNotConfigured, UpstreamUnavailable
from history import SnapshotStore
from providers.analytics import fetch_traffic
from providers.discord import fetch_guild_stats
from providers.mailchimp import fetch_list_stats
from providers.memberful import fetch_subscriptions
from providers.youtube import fetch_channel_stats
from schemas import HistoryWriteResult
from settings import AppSettings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["history"])


@router.get("/history", response_model=List[Dict[str, Any]])
def read_history(store: SnapshotStore = Depends(get_snapshot_store)):
    return store.read_all()


@router.post("/history", response_model=HistoryWriteResult)
def write_history(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    store: SnapshotStore = Depends(get_snapshot_store),
):
    try:
        store.append(payload or {})
    except InvalidSnapshot as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return HistoryWriteResult(success=True)


async def _membership_fields(client: httpx.AsyncClient, settings: AppSettings) -> Dict[str, Any]:
    records = await fetch_subscriptions(client, settings)
    revenue = compute_revenue(records)
    retention = compute_retention(records, now=datetime.now(timezone.utc))
    return {
        "memberful_members": revenue.active_count,
        "mrr": revenue.mrr,
        "ltv": revenue.ltv,
        "day7_retention": retention.day7,
        "day30_retention": retention.day30,
        "day90_retention": retention.day90,
        "monthly_churn": retention.monthly_churn,
    }


async def _youtube_fields(client: httpx.AsyncClient, settings: AppSettings) -> Dict[str, Any]:
    stats = await fetch_channel_stats(client, settings)
    return {
        "youtube_subscribers": stats["subscribers"],
        "youtube_views": stats["views"],
        "youtube_videos": stats["videos"],
    }


async def _mailchimp_fields(client: httpx.AsyncClient, settings: AppSettings) -> Dict[str, Any]:
    stats = await fetch_list_stats(client, settings)
    return {"mailchimp_members": stats["current"]}


async def _discord_fields(client: httpx.AsyncClient, settings: AppSettings) -> Dict[str, Any]:
    stats = await fetch_guild_stats(client, settings)
    return {
        "discord_members": stats["total_members"],
        "discord_online": stats["online"],
        "discord_new_members_7d": stats["new_members_7d"],
        "discord_messages_7d": stats["messages_7d"],
    }


async def _analytics_fields(client: httpx.AsyncClient, settings: AppSettings) -> Dict[str, Any]:
    stats = await fetch_traffic(client, settings)
    return {f"ga_{key}": value for key, value in stats.items()}


SNAPSHOT_SECTIONS = {
    "memberful": _membership_fields,
    "youtube": _youtube_fields,
    "mailchimp": _mailchimp_fields,
    "discord": _discord_fields,
    "analytics": _analytics_fields,
}


async def collect_snapshot(settings: AppSettings, client: httpx.AsyncClient) -> Dict[str, Any]:
    """
    Query every provider concurrently and flatten the results into one
    snapshot. Providers that are not configured or fail are left out.
    """
    names = list(SNAPSHOT_SECTIONS)
    results = await asyncio.gather(
        *(SNAPSHOT_SECTIONS[name](client, settings) for name in names),
        return_exceptions=True,
    )

    snapshot: Dict[str, Any] = {}
    for name, result in zip(names, results):
        if isinstance(result, ProviderNotConfigured):
            logger.info("Skipping %s in snapshot: %s", name, result)
        elif isinstance(result, UpstreamUnavailable):
            logger.error("Skipping %s in snapshot: %s", name, result)
        elif isinstance(result, BaseException):
            raise result
        else:
            snapshot.update(result)
    return snapshot
