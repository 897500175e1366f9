# src/reports/membership.py
from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx
from fastapi import APIRouter, Depends

from dependencies import get_http_client
from economics.retention import compute_retention
from economics.revenue import compute_revenue
from providers.memberful import fetch_subscriptions
from schemas import MembershipMetrics, RetentionMetrics
from settings import AppSettings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["membership"])


@router.get("/memberful", response_model=MembershipMetrics)
async def memberful_metrics(
    settings: AppSettings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Active members, MRR and LTV from the membership platform."""
    records = await fetch_subscriptions(client, settings)
    return MembershipMetrics.from_summary(compute_revenue(records))


@router.get("/retention", response_model=RetentionMetrics)
async def retention_metrics(
    settings: AppSettings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Day 7/30/90 cohort retention and overall churn."""
    records = await fetch_subscriptions(client, settings)
    summary = compute_retention(records, now=datetime.now(timezone.utc))
    return RetentionMetrics.from_summary(summary)
