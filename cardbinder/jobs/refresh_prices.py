"""
Scheduled job to refresh the Cardmarket price overlay.

Only codes with no price or a price older than the TTL are fetched. Requests
go out one at a time with a randomized pause in between, and each result is
committed before the next request so an interrupted run keeps its progress.
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field, replace
from datetime import datetime

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from cardbinder.catalog.store import Catalog, get_catalog_cache
from cardbinder.config import settings
from cardbinder.db.database import async_session_factory, init_db
from cardbinder.db.operations import get_price, list_prices, upsert_price
from cardbinder.models.catalog import CatalogEntry
from cardbinder.models.collection import PriceEntry, now_utc
from cardbinder.scrapers.cardmarket import USER_AGENT, ScrapeOutcome, fetch_price, is_stale

logger = logging.getLogger(__name__)


@dataclass
class RefreshSummary:
    """Counts from one refresh run."""

    catalog_size: int = 0
    queued: int = 0
    succeeded: int = 0
    failed: list[str] = field(default_factory=list)


def select_stale(
    catalog: Catalog,
    prices: list[PriceEntry],
    ttl_hours: float,
    now: datetime,
) -> list[CatalogEntry]:
    """Catalog entries with no price or a stale one, in catalog order."""
    updated = {p.card_code.upper(): p.updated_at for p in prices}
    return [
        entry
        for entry in catalog.entries
        if entry.code.upper() not in updated
        or is_stale(updated[entry.code.upper()], ttl_hours, now)
    ]


def apply_outcome(previous: PriceEntry | None, outcome: ScrapeOutcome, now: datetime) -> PriceEntry:
    """
    Merge a scrape outcome into the stored entry.

    Success replaces the figures and clears the error. Failure keeps the
    previous figures and timestamp and records the error.
    """
    if outcome.ok:
        return PriceEntry(
            card_code=outcome.code,
            trend_eur=outcome.trend_eur,
            avg30_eur=outcome.avg30_eur,
            updated_at=now,
            url=outcome.url,
        )

    if previous is None:
        return PriceEntry(
            card_code=outcome.code,
            trend_eur=None,
            avg30_eur=None,
            updated_at=None,
            url=outcome.url,
            last_error=outcome.error,
            last_error_at=now,
        )

    return replace(previous, url=outcome.url, last_error=outcome.error, last_error_at=now)


async def refresh_prices(
    session: AsyncSession,
    catalog: Catalog,
    client: httpx.AsyncClient,
    ttl_hours: float | None = None,
    delay_range: tuple[float, float] | None = None,
    limit: int | None = None,
) -> RefreshSummary:
    """
    Refresh missing and stale prices for every catalog card.

    Args:
        session: Database session; committed after each code
        catalog: Loaded catalog
        client: HTTP client used for the scrape requests
        ttl_hours: Age after which a price is refetched (settings default)
        delay_range: Min/max seconds to pause between requests (settings default)
        limit: Optional cap on the number of codes fetched this run

    Returns:
        RefreshSummary with per-run counts
    """
    ttl = settings.price_ttl_hours if ttl_hours is None else ttl_hours
    delay_min, delay_max = delay_range or (settings.scrape_delay_min, settings.scrape_delay_max)

    queue = select_stale(catalog, await list_prices(session), ttl, now_utc())
    if limit is not None:
        queue = queue[:limit]

    summary = RefreshSummary(catalog_size=len(catalog), queued=len(queue))
    logger.info("Catalog: %d | To fetch: %d (TTL %sh)", len(catalog), len(queue), ttl)

    for i, entry in enumerate(queue):
        if i > 0 and delay_max > 0:
            await asyncio.sleep(random.uniform(delay_min, delay_max))

        outcome = await fetch_price(client, entry.code, entry.name)
        previous = await get_price(session, entry.code)
        await upsert_price(session, apply_outcome(previous, outcome, now_utc()))
        await session.commit()

        if outcome.ok:
            summary.succeeded += 1
            logger.info(
                "[OK] %s trend=%s avg30=%s (%s)",
                entry.code,
                outcome.trend_eur,
                outcome.avg30_eur,
                outcome.url,
            )
        else:
            summary.failed.append(entry.code)
            logger.warning("[FAIL] %s (%s) %s", entry.code, outcome.url, outcome.error)

    logger.info(
        "Price refresh complete: %d ok, %d failed", summary.succeeded, len(summary.failed)
    )
    return summary


async def run_price_refresh(limit: int | None = None) -> RefreshSummary:
    """Refresh prices using the configured catalog and database."""
    await init_db()
    catalog = await get_catalog_cache().load()

    async with (
        httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            timeout=settings.http_timeout,
        ) as client,
        async_session_factory() as session,
    ):
        return await refresh_prices(session, catalog, client, limit=limit)


def main() -> None:
    """CLI entry point for running the price refresh."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_price_refresh())


if __name__ == "__main__":
    main()
