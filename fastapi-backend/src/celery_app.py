from __future__ import annotations

import sys
import asyncio
import logging
from celery import Celery
from typing import Any, Dict


from history import SnapshotStore
from providers.base import create_client
from reports.snapshot import collect_snapshot
from settings import AppSettings, get_settings

s = get_settings()
logging.basicConfig(
    level=s.log_level.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger("celery")


def build_beat_schedule(settings: AppSettings) -> Dict[str, Any]:
    if not settings.snapshot_interval_seconds:
        return {}
    return {
        "capture-metrics-snapshot": {
            "task": "tasks.capture_snapshot",
            "schedule": float(settings.snapshot_interval_seconds),
        }
    }


def create_celery(settings) -> Celery:
    """
    Factory to create a configured Celery instance.

    Keeps config colocated and testable. No side effects beyond app construction.
    """
    app = Celery(
        main=settings.app_name,
        broker=settings.celery_broker_url,
        backend=settings.celery_result_backend,
    )
    app.conf.update(
        task_default_queue=settings.celery_task_default_queue,
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],
        worker_hijack_root_logger=False,
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        broker_heartbeat=30,
        broker_connection_retry_on_startup=True,
        result_extended=True,
        timezone="UTC",
        worker_send_task_events=True,
        task_send_sent_event=True,
        # Beat schedule configuration
        beat_schedule=build_beat_schedule(settings),
        beat_scheduler="celery.beat:PersistentScheduler",
        beat_schedule_filename="celerybeat-schedule",
    )
    return app


celery_app: Celery = create_celery(s)


@celery_app.task(name="tasks.ping")
def ping(payload: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Trivial health task to verify worker reachability and queue wiring.
    """
    return {"ok": True, "payload": payload or {}, "worker": s.app_name}


async def _collect(settings: AppSettings) -> Dict[str, Any]:
    async with create_client(settings) as client:
        return await collect_snapshot(settings, client)


def capture_snapshot_now(settings: AppSettings, store: SnapshotStore | None = None) -> Dict[str, Any]:
    store = store or SnapshotStore(settings.history_file)
    snapshot = asyncio.run(_collect(settings))
    record = store.append(snapshot)
    logger.info("Captured metrics snapshot with %d fields", len(snapshot))
    return record


@celery_app.task(name="tasks.capture_snapshot")
def capture_snapshot() -> Dict[str, Any]:
    """
    Poll every configured provider and append one snapshot to the history log.
    """
    return capture_snapshot_now(s)
