#!/usr/bin/env python3
from __future__ import annotations
import argparse
import json
import os
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, TypedDict

import numpy as np
from faker import Faker
from tqdm import tqdm

from economics.records import SubscriptionRecord

# -----------------------
# Data classes / helpers
# -----------------------
def iso(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat(timespec="seconds")


@dataclass
class MockPlan:
    name: str
    price_cents: int
    weight: float
    # probability of cancelling per 30 days of age
    monthly_churn: float


PLANS: List[MockPlan] = [
    MockPlan(name="Monthly", price_cents=500, weight=0.55, monthly_churn=0.08),
    MockPlan(name="Monthly Plus", price_cents=1000, weight=0.15, monthly_churn=0.06),
    MockPlan(name="6-Month Plan", price_cents=2700, weight=0.12, monthly_churn=0.03),
    MockPlan(name="Annual Plan", price_cents=5000, weight=0.15, monthly_churn=0.015),
    MockPlan(name="Yearly Founders", price_cents=12000, weight=0.03, monthly_churn=0.01),
]


class GenerateMemberfulMockArgs(TypedDict, total=False):
    seed: int
    n_subscriptions: int
    max_age_days: int
    out_file: Optional[str]


# -----------------------
# Generators
# -----------------------
def gen_subscription_nodes(
    n: int,
    seed: int | None = None,
    max_age_days: int = 400,
    now: datetime | None = None,
    progress: bool = False,
) -> List[Dict[str, Any]]:
    """Memberful-shaped `subscriptions.edges[].node` payloads."""
    rng = np.random.default_rng(seed)
    fake = Faker()
    fake.seed_instance(seed)
    now = now or datetime.now(timezone.utc)
    weights = np.array([p.weight for p in PLANS])
    weights = weights / weights.sum()

    nodes = []
    for _ in tqdm(range(n), desc="subscriptions", disable=not progress):
        plan = PLANS[int(rng.choice(len(PLANS), p=weights))]
        created = fake.date_time_between(
            start_date=now - timedelta(days=max_age_days), end_date=now, tzinfo=timezone.utc
        )
        age_months = (now - created).total_seconds() / (86400 * 30)
        survival = (1 - plan.monthly_churn) ** age_months
        active = bool(rng.random() < survival)
        nodes.append(
            {
                "active": active,
                "createdAt": iso(created),
                "expiresAt": None if active else iso(now - timedelta(days=int(rng.integers(0, 30)))),
                "plan": {"name": plan.name, "priceCents": plan.price_cents},
            }
        )
    return nodes


def generate_subscription_records(
    n: int, seed: int | None = None, now: datetime | None = None
) -> List[SubscriptionRecord]:
    return [SubscriptionRecord.from_node(node) for node in gen_subscription_nodes(n, seed=seed, now=now)]


def generate_memberful_mock_data(args: GenerateMemberfulMockArgs) -> str:
    seed = args.get("seed")
    print("Generating subscriptions...")
    nodes = gen_subscription_nodes(
        args.get("n_subscriptions", 250),
        seed=seed,
        max_age_days=args.get("max_age_days", 400),
        progress=True,
    )

    out_file = args.get("out_file") or os.environ.get("MEMBERFUL_MOCK_OUT_FILE")
    if out_file is None:
        seed_val = seed if seed is not None else int(time.time())
        out_file = os.path.abspath(f"memberful_mock_seed_{seed_val}.json")
        print(f"No out_file supplied, using default: {out_file}")

    payload = {"data": {"subscriptions": {"edges": [{"node": node} for node in nodes]}}}
    with open(out_file, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    print(f"Wrote {len(nodes)} subscriptions to {out_file}")
    return out_file


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate mock Memberful subscription data")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--n-subscriptions", type=int, default=250)
    parser.add_argument("--max-age-days", type=int, default=400)
    parser.add_argument("--out-file", default=None)
    ns = parser.parse_args(argv)
    generate_memberful_mock_data(
        GenerateMemberfulMockArgs(
            seed=ns.seed,
            n_subscriptions=ns.n_subscriptions,
            max_age_days=ns.max_age_days,
            out_file=ns.out_file,
        )
    )


if __name__ == "__main__":
    main()
