import logging
import random

import pytest

from economics.plans import PlanCategory, PlanClassifier
from economics.revenue import RevenueSummary, compute_revenue, plan_price


def test_empty_input():
    assert compute_revenue([]) == RevenueSummary(mrr=0, ltv=0, active_count=0)


def test_only_inactive_records(make_record):
    summary = compute_revenue([make_record(active=False), make_record(active=False)])
    assert summary == RevenueSummary(mrr=0, ltv=0, active_count=0)


def test_single_monthly(make_record):
    summary = compute_revenue([make_record(price=1000, label="Monthly")])
    assert (summary.mrr, summary.ltv, summary.active_count) == (10, 200, 1)


def test_single_annual(make_record):
    summary = compute_revenue([make_record(price=12000, label="Annual Plan")])
    # 4 cycles x 120 units
    assert (summary.mrr, summary.ltv) == (10, 480)


def test_single_semiannual(make_record):
    summary = compute_revenue([make_record(price=6000, label="6-Month Plus")])
    assert (summary.mrr, summary.ltv) == (10, 360)


def test_mixed_plans(make_record):
    records = [
        make_record(price=1000, label="Monthly"),
        make_record(price=6000, label="6 month"),
        make_record(price=12000, label="Yearly"),
        make_record(active=False, price=99900, label="Yearly"),
    ]
    assert compute_revenue(records) == RevenueSummary(mrr=30, ltv=1040, active_count=3)


def test_rounds_only_at_output(make_record):
    # each record is worth 1/12 of a unit per month; rounding per record would give 0
    records = [make_record(price=100, label="Annual") for _ in range(7)]
    assert compute_revenue(records).mrr == 1


def test_half_unit_rounds_up(make_record):
    summary = compute_revenue([make_record(price=250, label="Monthly")])
    assert summary.mrr == 3
    assert summary.ltv == 50


@pytest.mark.parametrize("bad_price", ["abc", None, -500, True, float("nan"), float("inf"), {}])
def test_malformed_price_contributes_zero(make_record, bad_price):
    records = [make_record(price=1000), make_record(price=bad_price)]
    assert compute_revenue(records) == RevenueSummary(mrr=10, ltv=200, active_count=2)


def test_malformed_price_is_logged(make_record, caplog):
    with caplog.at_level(logging.WARNING, logger="economics.revenue"):
        compute_revenue([make_record(price="n/a", label="Gold")])
    assert "malformed plan price" in caplog.text


def test_numeric_string_price_is_accepted(make_record):
    assert plan_price(make_record(price="1500")) == 15.0


def test_idempotent_and_order_independent(make_record):
    records = [
        make_record(price=p, label=label, active=active)
        for p, label, active in [
            (500, "Monthly", True),
            (2700, "6-Month", True),
            (5000, "Annual", False),
            (12000, "Yearly", True),
            (333, "Monthly", True),
        ]
    ]
    first = compute_revenue(records)
    assert compute_revenue(records) == first
    shuffled = list(records)
    random.Random(7).shuffle(shuffled)
    assert compute_revenue(shuffled) == first


def test_custom_classifier(make_record):
    classifier = PlanClassifier({PlanCategory.ANNUAL: ("pro",)})
    summary = compute_revenue([make_record(price=12000, label="Pro")], classifier=classifier)
    assert (summary.mrr, summary.ltv) == (10, 480)


def test_input_records_untouched(make_record):
    record = make_record(price="bogus")
    compute_revenue([record])
    assert record.plan_price_cents == "bogus"


def test_scenario(make_record):
    records = [
        make_record(active=True, days_ago=10, price=500, label="Monthly"),
        make_record(active=False, days_ago=40, price=500, label="Monthly"),
    ]
    assert compute_revenue(records) == RevenueSummary(mrr=5, ltv=100, active_count=1)
