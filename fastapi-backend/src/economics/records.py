# src/economics/records.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

PriceValue = Union[int, float, str, None]


def to_utc(value: Any) -> Optional[datetime]:
    """
    Normalize a timestamp to a timezone-aware UTC datetime.
    - None or empty -> None
    - str -> ISO-8601 parse, None when unparseable
    - naive datetime -> assumed UTC
    - aware datetime -> converted to UTC
    """
    if value is None or value == "":
        return None

    if isinstance(value, str):
        try:
            value = date_parser.isoparse(value)
        except (ValueError, OverflowError):
            return None

    if not isinstance(value, datetime):
        return None

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class SubscriptionRecord:
    active: bool
    created_at: Optional[datetime]
    plan_label: str = ""
    plan_price_cents: PriceValue = 0
    expires_at: Optional[datetime] = None

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> "SubscriptionRecord":
        """Build a record from a Memberful `subscriptions.edges[].node` object."""
        plan = node.get("plan") or {}

        created_raw = node.get("createdAt")
        created_at = to_utc(created_raw)
        if created_at is None and created_raw:
            logger.warning("Unparseable subscription createdAt: %r", created_raw)

        expires_raw = node.get("expiresAt")
        expires_at = to_utc(expires_raw)
        if expires_at is None and expires_raw:
            logger.warning("Unparseable subscription expiresAt: %r", expires_raw)

        return cls(
            active=node.get("active") is True,
            created_at=created_at,
            expires_at=expires_at,
            plan_label=plan.get("name") or "",
            plan_price_cents=plan.get("priceCents"),
        )

    def age_in_days(self, now: datetime) -> Optional[float]:
        """Fractional days elapsed between signup and `now`."""
        if self.created_at is None:
            return None
        return (to_utc(now) - self.created_at).total_seconds() / 86400
