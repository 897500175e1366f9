# src/dependencies.py
from __future__ import annotations

from functools import lru_cache
from typing import AsyncIterator

import httpx
from fastapi import Depends

from history import SnapshotStore
from providers.base import create_client
from settings import AppSettings, get_settings


async def get_http_client(
    settings: AppSettings = Depends(get_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    async with create_client(settings) as client:
        yield client


@lru_cache(maxsize=8)
def _store_for(path: str) -> SnapshotStore:
    # one store per history file
    return SnapshotStore(path)


def get_snapshot_store(settings: AppSettings = Depends(get_settings)) -> SnapshotStore:
    return _store_for(settings.history_file)
