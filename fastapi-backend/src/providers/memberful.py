# src/providers/memberful.py
from __future__ import annotations

import logging
from typing import List

import httpx

from economics.records import SubscriptionRecord
from errors import UpstreamUnavailable
from generators.generate_memberful_mock import generate_subscription_records
from providers.base import request_json, require
from settings import AppSettings

logger = logging.getLogger(__name__)

SOURCE = "Memberful"

SUBSCRIPTIONS_QUERY = """{
  subscriptions(first: %d) {
    edges {
      node {
        active
        createdAt
        expiresAt
        plan {
          priceCents
          name
        }
      }
    }
  }
}"""


def graphql_url(subdomain: str) -> str:
    return f"https://{subdomain}.memberful.com/api/graphql"


def parse_subscriptions(payload: dict) -> List[SubscriptionRecord]:
    errors = payload.get("errors")
    if errors:
        first = errors[0] if isinstance(errors, list) else errors
        message = first.get("message") if isinstance(first, dict) else str(first)
        logger.error("Memberful GraphQL errors: %s", errors)
        raise UpstreamUnavailable(SOURCE, message or "Memberful GraphQL error")

    try:
        edges = payload["data"]["subscriptions"]["edges"]
    except (KeyError, TypeError) as e:
        raise UpstreamUnavailable(SOURCE, "Memberful response has no subscriptions") from e

    return [SubscriptionRecord.from_node(edge.get("node") or {}) for edge in edges or []]


async def fetch_subscriptions(
    client: httpx.AsyncClient, settings: AppSettings
) -> List[SubscriptionRecord]:
    """Fetch up to `memberful_page_size` subscription records."""
    if settings.use_mock_data:
        return generate_subscription_records(
            settings.mock_subscriptions, seed=settings.mock_seed
        )

    require(
        SOURCE,
        memberful_subdomain=settings.memberful_subdomain,
        memberful_api_key=settings.memberful_api_key,
    )
    payload = await request_json(
        client,
        "POST",
        graphql_url(settings.memberful_subdomain),
        source=SOURCE,
        headers={"Authorization": f"Bearer {settings.memberful_api_key}"},
        json={"query": SUBSCRIPTIONS_QUERY % settings.memberful_page_size},
    )
    records = parse_subscriptions(payload)
    logger.debug("Fetched %d Memberful subscriptions", len(records))
    return records
