# src/schemas.py
from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from economics.retention import RetentionSummary
from economics.revenue import RevenueSummary

Percentage = Union[int, float]


class MembershipMetrics(BaseModel):
    current: int
    mrr: int
    ltv: int

    @classmethod
    def from_summary(cls, summary: RevenueSummary) -> "MembershipMetrics":
        return cls(current=summary.active_count, mrr=summary.mrr, ltv=summary.ltv)


class RetentionMetrics(BaseModel):
    day7_retention: Percentage
    day30_retention: Percentage
    day90_retention: Percentage
    monthly_churn: Percentage

    @classmethod
    def from_summary(cls, summary: RetentionSummary) -> "RetentionMetrics":
        return cls(
            day7_retention=summary.day7,
            day30_retention=summary.day30,
            day90_retention=summary.day90,
            monthly_churn=summary.monthly_churn,
        )


class YoutubeMetrics(BaseModel):
    current: int
    subscribers: int
    views: int
    videos: int


class MailchimpMetrics(BaseModel):
    current: int


class DiscordMetrics(BaseModel):
    online: Optional[int] = None
    total_members: Optional[int] = None
    new_members_7d: Optional[int] = None
    messages_7d: Optional[int] = None
    active_members_7d: Optional[int] = None
    voice_participants_7d: Optional[int] = None


class AnalyticsMetrics(BaseModel):
    active_users_7d: int
    sessions_7d: int
    pageviews_7d: int


class MetricSnapshot(BaseModel):
    """A stored history entry: `date` plus whatever flat fields were posted."""

    model_config = ConfigDict(extra="allow")

    date: str


class HistoryWriteResult(BaseModel):
    success: bool = True
