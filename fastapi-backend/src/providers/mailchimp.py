# src/providers/mailchimp.py
from __future__ import annotations

from typing import Dict

import httpx

from errors import UpstreamUnavailable
from providers.base import request_json, require
from settings import AppSettings

SOURCE = "Mailchimp"


def list_url(server: str, list_id: str) -> str:
    return f"https://{server}.api.mailchimp.com/3.0/lists/{list_id}"


async def fetch_list_stats(client: httpx.AsyncClient, settings: AppSettings) -> Dict[str, int]:
    require(
        SOURCE,
        mailchimp_server=settings.mailchimp_server,
        mailchimp_list_id=settings.mailchimp_list_id,
        mailchimp_api_key=settings.mailchimp_api_key,
    )
    data = await request_json(
        client,
        "GET",
        list_url(settings.mailchimp_server, settings.mailchimp_list_id),
        source=SOURCE,
        headers={"Authorization": f"Bearer {settings.mailchimp_api_key}"},
    )
    try:
        return {"current": int(data["stats"]["member_count"])}
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamUnavailable(SOURCE, "Mailchimp list has no member count") from e
