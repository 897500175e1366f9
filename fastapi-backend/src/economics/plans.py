# src/economics/plans.py
from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping, Optional, Sequence


class PlanCategory(str, Enum):
    MONTHLY = "monthly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"


# Checked in insertion order; the first category with a matching keyword wins.
PLAN_KEYWORDS: Dict[PlanCategory, Sequence[str]] = {
    PlanCategory.ANNUAL: ("annual", "yearly", "year"),
    PlanCategory.SEMIANNUAL: ("6-month", "6 month", "semi"),
}

DEFAULT_CATEGORY = PlanCategory.MONTHLY


class PlanClassifier:
    """
    Maps a free-text plan label to a billing-period category by
    case-insensitive substring matching against a keyword table.
    """

    def __init__(
        self,
        keywords: Optional[Mapping[PlanCategory, Sequence[str]]] = None,
        default: PlanCategory = DEFAULT_CATEGORY,
    ):
        table = PLAN_KEYWORDS if keywords is None else keywords
        self._keywords = tuple(
            (category, tuple(k.lower() for k in words)) for category, words in table.items()
        )
        self.default = default

    def classify(self, plan_label: Optional[str]) -> PlanCategory:
        name = (plan_label or "").lower()
        for category, words in self._keywords:
            if any(word in name for word in words):
                return category
        return self.default

    __call__ = classify


default_classifier = PlanClassifier()


def classify_plan(plan_label: Optional[str]) -> PlanCategory:
    return default_classifier.classify(plan_label)
