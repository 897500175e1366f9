# src/economics/revenue.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from economics.plans import PlanCategory, PlanClassifier, default_classifier
from economics.records import SubscriptionRecord
from economics.utils import round_half_up

logger = logging.getLogger(__name__)


BILLING_MONTHS: Dict[PlanCategory, int] = {
    PlanCategory.MONTHLY: 1,
    PlanCategory.SEMIANNUAL: 6,
    PlanCategory.ANNUAL: 12,
}

# Typical number of billing cycles a subscriber pays for before leaving.
# Heuristic, not a fitted model.
LIFETIME_CYCLES: Dict[PlanCategory, int] = {
    PlanCategory.MONTHLY: 20,
    PlanCategory.SEMIANNUAL: 6,
    PlanCategory.ANNUAL: 4,
}


@dataclass(frozen=True)
class RevenueSummary:
    mrr: int
    ltv: int
    active_count: int


def plan_price(record: SubscriptionRecord) -> float:
    """
    Price of one billing cycle in whole currency units.

    Non-numeric, non-finite, or negative prices are treated as 0 so a single
    bad record cannot poison the aggregate.
    """
    raw = record.plan_price_cents
    if isinstance(raw, bool):
        price = None
    else:
        try:
            price = float(raw)
        except (TypeError, ValueError):
            price = None

    if price is None or not math.isfinite(price) or price < 0:
        logger.warning(
            "Ignoring malformed plan price %r for plan %r", raw, record.plan_label
        )
        return 0.0
    return price / 100


def compute_revenue(
    records: Iterable[SubscriptionRecord],
    classifier: Optional[PlanClassifier] = None,
) -> RevenueSummary:
    classify = classifier or default_classifier
    active: List[SubscriptionRecord] = [r for r in records if r.active is True]

    mrr = 0.0
    groups: Dict[PlanCategory, List[float]] = {category: [] for category in PlanCategory}
    for record in active:
        category = classify(record.plan_label)
        price = plan_price(record)
        mrr += price / BILLING_MONTHS[category]
        groups[category].append(price)

    ltv = sum(
        LIFETIME_CYCLES[category] * price
        for category, prices in groups.items()
        for price in prices
    )

    return RevenueSummary(
        mrr=round_half_up(mrr),
        ltv=round_half_up(ltv),
        active_count=len(active),
    )
