import json
from datetime import datetime, timezone

from faker import Faker

from economics.plans import PlanCategory, classify_plan
from generators.generate_memberful_mock import (
    PLANS,
    gen_subscription_nodes,
    generate_subscription_records,
    main,
)

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def test_nodes_are_memberful_shaped():
    nodes = gen_subscription_nodes(25, seed=1, now=NOW)
    assert len(nodes) == 25
    for node in nodes:
        assert set(node) == {"active", "createdAt", "expiresAt", "plan"}
        assert node["plan"]["name"] in {p.name for p in PLANS}
        assert node["createdAt"] <= NOW.isoformat()


def test_same_seed_same_data():
    assert gen_subscription_nodes(30, seed=5, now=NOW) == gen_subscription_nodes(30, seed=5, now=NOW)


def test_mock_plans_cover_every_category():
    assert {classify_plan(p.name) for p in PLANS} == set(PlanCategory)


def test_records_parse():
    records = generate_subscription_records(10, seed=2, now=NOW)
    assert all(r.created_at is not None for r in records)


def test_cli_writes_graphql_payload(tmp_path):
    out = tmp_path / "mock.json"
    main(["--seed", "3", "--n-subscriptions", "12", "--out-file", str(out)])
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert len(payload["data"]["subscriptions"]["edges"]) == 12


def test_seeded_runs_do_not_interfere():
    first = gen_subscription_nodes(15, seed=5, now=NOW)
    gen_subscription_nodes(15, seed=9, now=NOW)
    Faker.seed(1234)
    assert gen_subscription_nodes(15, seed=5, now=NOW) == first
