import asyncio

import httpx

from celery_app import build_beat_schedule, capture_snapshot_now
from conftest import memberful_node, memberful_payload
from history import SnapshotStore
from reports.snapshot import collect_snapshot


def collect(settings, handler):
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await collect_snapshot(settings, client)

    return asyncio.run(go())


def test_collect_skips_unconfigured_providers(bare_settings):
    settings = bare_settings.model_copy(
        update={"mailchimp_server": "us21", "mailchimp_list_id": "l1", "mailchimp_api_key": "k"}
    )

    def handler(request):
        assert request.url.host == "us21.api.mailchimp.com"
        return httpx.Response(200, json={"stats": {"member_count": 77}})

    assert collect(settings, handler) == {"mailchimp_members": 77}


def test_collect_flattens_membership_metrics(bare_settings):
    settings = bare_settings.model_copy(
        update={"memberful_subdomain": "acme", "memberful_api_key": "k"}
    )

    def handler(request):
        return httpx.Response(
            200,
            json=memberful_payload(
                memberful_node(price=1000, name="Monthly"),
                memberful_node(active=False, price=1000, name="Monthly"),
            ),
        )

    snapshot = collect(settings, handler)
    assert snapshot["memberful_members"] == 1
    assert snapshot["mrr"] == 10
    assert snapshot["ltv"] == 200
    assert snapshot["monthly_churn"] == 50.0
    assert set(snapshot) >= {"day7_retention", "day30_retention", "day90_retention"}


def test_collect_drops_failing_provider(settings):
    settings = settings.model_copy(update={"ga_private_key": None})

    def handler(request):
        if request.url.host == "us21.api.mailchimp.com":
            return httpx.Response(200, json={"stats": {"member_count": 5}})
        return httpx.Response(503, json={"message": "maintenance"})

    snapshot = collect(settings, handler)
    assert snapshot == {"mailchimp_members": 5}


def test_capture_snapshot_appends_to_history(bare_settings):
    settings = bare_settings.model_copy(update={"use_mock_data": True, "mock_subscriptions": 60})
    store = SnapshotStore(settings.history_file)

    record = capture_snapshot_now(settings, store)

    entries = store.read_all()
    assert entries == [record]
    assert entries[0]["memberful_members"] > 0
    assert "date" in entries[0]


def test_beat_schedule_disabled_by_default(bare_settings):
    assert build_beat_schedule(bare_settings) == {}


def test_beat_schedule_from_interval(bare_settings):
    settings = bare_settings.model_copy(update={"snapshot_interval_seconds": 3600})
    schedule = build_beat_schedule(settings)
    assert schedule["capture-metrics-snapshot"]["task"] == "tasks.capture_snapshot"
    assert schedule["capture-metrics-snapshot"]["schedule"] == 3600.0


def test_collect_survives_garbled_discord_insights(bare_settings):
    settings = bare_settings.model_copy(update={"discord_guild_id": "42", "discord_bot_token": "t"})

    def handler(request):
        if request.url.path.endswith("/member-insights"):
            return httpx.Response(200, text="<html>gateway</html>")
        return httpx.Response(
            200, json={"approximate_presence_count": 1, "approximate_member_count": 8}
        )

    snapshot = collect(settings, handler)
    assert snapshot["discord_members"] == 8
    assert snapshot["discord_messages_7d"] is None
