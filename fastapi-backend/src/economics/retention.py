# src/economics/retention.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from economics.records import SubscriptionRecord, to_utc
from economics.utils import Number, percentage

COHORT_START_DAYS: Sequence[int] = (7, 30, 90)
COHORT_WINDOW_DAYS = 7


@dataclass(frozen=True)
class RetentionSummary:
    day7: Number
    day30: Number
    day90: Number
    monthly_churn: Number


def cohort(
    records: Iterable[SubscriptionRecord],
    now: datetime,
    start_day: int,
    width: int = COHORT_WINDOW_DAYS,
) -> List[SubscriptionRecord]:
    """Records that signed up between `start_day` (inclusive) and `start_day + width` (exclusive) days ago."""
    members = []
    for record in records:
        age = record.age_in_days(now)
        if age is not None and start_day <= age < start_day + width:
            members.append(record)
    return members


def cohort_retention(members: Sequence[SubscriptionRecord]) -> Number:
    return percentage(sum(1 for r in members if r.active is True), len(members))


def churn_rate(records: Sequence[SubscriptionRecord]) -> Number:
    # An empty population reports 0 rather than failing.
    return percentage(sum(1 for r in records if r.active is not True), len(records))


def compute_retention(
    records: Iterable[SubscriptionRecord],
    now: Optional[datetime] = None,
) -> RetentionSummary:
    records = list(records)
    now = to_utc(now) if now is not None else datetime.now(timezone.utc)

    day7, day30, day90 = (
        cohort_retention(cohort(records, now, start_day)) for start_day in COHORT_START_DAYS
    )
    return RetentionSummary(
        day7=day7,
        day30=day30,
        day90=day90,
        monthly_churn=churn_rate(records),
    )
