"""
Online catalog build from the card-data API.

Pulls full sets, starter decks and promos, keeps the first record seen for
each code, and carries the API's market price snapshot onto the entries.
A failed endpoint is logged and skipped; the catalog is still produced from
whatever endpoints succeeded.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from cardbinder.catalog.merge import CatalogAccumulator, MergeStrategy
from cardbinder.catalog.normalize import normalize_api_card
from cardbinder.config import settings
from cardbinder.models.catalog import CatalogEntry

logger = logging.getLogger(__name__)

USER_AGENT = "cardbinder/0.1 (catalog builder)"


@dataclass(frozen=True, slots=True)
class CardApiEndpoint:
    """One card-data API endpoint."""

    name: str
    path: str


CARD_API_ENDPOINTS: tuple[CardApiEndpoint, ...] = (
    CardApiEndpoint("Set Cards", "/api/allSetCards/"),
    CardApiEndpoint("Starter Deck Cards", "/api/allSTCards/"),
    CardApiEndpoint("Promo Cards", "/api/allPromoCards/"),
)


@dataclass
class OnlineBuildReport:
    """Outcome of an online catalog build."""

    entries: list[CatalogEntry] = field(default_factory=list)
    raw_count: int = 0
    failed_endpoints: dict[str, str] = field(default_factory=dict)


def _records_from_payload(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, list):
        records = data
    elif isinstance(data, dict) and isinstance(data.get("data"), list):
        records = data["data"]
    elif isinstance(data, dict):
        records = list(data.values())
    else:
        records = []
    return [r for r in records if isinstance(r, dict)]


async def fetch_endpoint(
    client: httpx.AsyncClient, endpoint: CardApiEndpoint
) -> list[dict[str, Any]]:
    """
    Fetch raw card records from one endpoint.

    Raises:
        httpx.HTTPError: If the request fails
        ValueError: If the body is not JSON
    """
    response = await client.get(endpoint.path)
    response.raise_for_status()
    return _records_from_payload(response.json())


async def build_catalog_online(
    client: httpx.AsyncClient | None = None,
    endpoints: tuple[CardApiEndpoint, ...] = CARD_API_ENDPOINTS,
) -> OnlineBuildReport:
    """
    Build the catalog from every card-data API endpoint.

    Args:
        client: Optional client (must have base_url set); one is created
            from settings otherwise
        endpoints: Endpoints to query, in priority order

    Returns:
        OnlineBuildReport with code-sorted entries and per-endpoint failures.
    """
    if client is None:
        async with httpx.AsyncClient(
            base_url=settings.card_api_base,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            timeout=settings.http_timeout,
        ) as owned_client:
            return await build_catalog_online(owned_client, endpoints)

    report = OnlineBuildReport()
    accumulator = CatalogAccumulator(MergeStrategy.FIRST_WINS)

    for endpoint in endpoints:
        logger.info("GET %s (%s)", endpoint.path, endpoint.name)
        try:
            records = await fetch_endpoint(client, endpoint)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Endpoint %s failed, continuing without it: %s", endpoint.name, e)
            report.failed_endpoints[endpoint.name] = str(e) or type(e).__name__
            continue

        report.raw_count += len(records)
        for raw in records:
            entry = normalize_api_card(raw)
            if entry is not None:
                accumulator.add(entry)

    report.entries = accumulator.entries()
    logger.info("Raw records: %d, normalized: %d", report.raw_count, len(report.entries))
    return report
