"""
Collection vs. catalog reconciliation.

Joins owned stock lines against the catalog and the price overlay to build
the views a consumer displays: per-set groups with completion, missing-card
lists, and value statistics. Nothing here touches storage or mutates the
catalog.
"""

import math
from dataclasses import dataclass

from cardbinder.catalog.normalize import UNKNOWN_SET
from cardbinder.catalog.store import Catalog, set_key
from cardbinder.models.catalog import CatalogEntry
from cardbinder.models.collection import CollectionItem, PriceEntry


@dataclass(frozen=True, slots=True)
class EnrichedItem:
    """A stock line annotated with catalog and price data."""

    item: CollectionItem
    name: str | None
    image_url: str | None
    set: str | None
    set_name: str | None
    market_price: float | None

    @property
    def card_code(self) -> str:
        return self.item.card_code.upper()

    @property
    def qty(self) -> int:
        return self.item.qty


@dataclass(frozen=True, slots=True)
class Completion:
    """
    Owned distinct codes over a total.

    `ratio` is clamped to [0, 1]; an owned count above the total (stale
    catalog) displays as complete rather than failing.
    """

    owned: int
    total: int

    @property
    def ratio(self) -> float:
        if self.total <= 0:
            return 0.0
        return min(1.0, max(0.0, self.owned / self.total))

    @property
    def percent(self) -> float:
        """Ratio as a percentage, one decimal, halves rounded up."""
        return math.floor(self.ratio * 1000 + 0.5) / 10


@dataclass
class SetGroup:
    """Owned items of one set with completion figures."""

    set_code: str
    set_name: str
    items: list[EnrichedItem]
    total_cards: int
    unique_items: int
    owned_unique_codes: int
    total_in_set: int | None
    missing_in_set: int | None

    @property
    def completion(self) -> Completion | None:
        if self.total_in_set is None:
            return None
        return Completion(owned=self.owned_unique_codes, total=self.total_in_set)


@dataclass(frozen=True, slots=True)
class CollectionStats:
    """Quantity and value summary of a collection."""

    total_cards: int
    unique_items: int
    estimated_value: float
    missing_price: int


@dataclass
class CollectionView:
    """Aggregate view returned after reads and mutations."""

    items: list[EnrichedItem]
    groups: list[SetGroup]
    stats: CollectionStats
    completion: Completion
    query: str = ""


def resolve_market_price(entry: CatalogEntry | None, price: PriceEntry | None) -> float | None:
    """Overlay trend price first, then the catalog's baked-in price."""
    if price is not None and price.trend_eur is not None:
        return price.trend_eur
    if entry is not None and entry.market_price is not None:
        return entry.market_price
    return None


def enrich_items(
    items: list[CollectionItem],
    catalog: Catalog,
    prices: list[PriceEntry] | dict[str, PriceEntry],
) -> list[EnrichedItem]:
    """
    Annotate items with catalog name, image, set and resolved market price.

    Codes absent from the catalog keep None for catalog fields. The result
    is sorted by card code.
    """
    if isinstance(prices, dict):
        price_by_code = {code.upper(): p for code, p in prices.items()}
    else:
        price_by_code = {p.card_code.upper(): p for p in prices}

    enriched: list[EnrichedItem] = []
    for item in items:
        entry = catalog.lookup_by_code(item.card_code)
        price = price_by_code.get(item.card_code.upper())
        enriched.append(
            EnrichedItem(
                item=item,
                name=entry.name if entry else None,
                image_url=entry.image_url if entry else None,
                set=entry.set if entry else None,
                set_name=entry.set_name if entry else None,
                market_price=resolve_market_price(entry, price),
            )
        )

    enriched.sort(key=lambda e: e.card_code)
    return enriched


def filter_items(items: list[EnrichedItem], query: str) -> list[EnrichedItem]:
    """Case-insensitive substring filter on code or name."""
    q = query.strip().lower()
    if not q:
        return items
    return [
        it for it in items if q in it.card_code.lower() or q in (it.name or "").lower()
    ]


def _group_sort_key(group: SetGroup) -> tuple[bool, str]:
    return (group.set_code == UNKNOWN_SET, group.set_code)


def group_by_set(items: list[EnrichedItem], catalog: Catalog) -> list[SetGroup]:
    """
    Partition items by upper-cased set code.

    Items without a set land in UNKNOWN, which sorts last; other sets sort
    by code. Set totals come from the catalog's precomputed table; a set
    missing from it has unknown total and missing counts.
    """
    by_set: dict[str, list[EnrichedItem]] = {}
    for it in items:
        by_set.setdefault(set_key(it.set), []).append(it)

    set_totals = catalog.set_totals
    set_names = catalog.set_names

    groups: list[SetGroup] = []
    for set_code, members in by_set.items():
        owned_codes = {it.card_code for it in members}
        total_in_set = set_totals.get(set_code)
        missing = None if total_in_set is None else max(0, total_in_set - len(owned_codes))

        item_set_name = next(
            (it.set_name.strip() for it in members if it.set_name and it.set_name.strip()),
            None,
        )

        groups.append(
            SetGroup(
                set_code=set_code,
                set_name=item_set_name or set_names.get(set_code) or set_code,
                items=sorted(members, key=lambda it: it.card_code),
                total_cards=sum(it.qty for it in members),
                unique_items=len(members),
                owned_unique_codes=len(owned_codes),
                total_in_set=total_in_set,
                missing_in_set=missing,
            )
        )

    groups.sort(key=_group_sort_key)
    return groups


def global_completion(
    items: list[CollectionItem] | list[EnrichedItem], catalog: Catalog
) -> Completion:
    """Distinct owned codes over distinct catalog codes."""
    owned = {_code_of(it) for it in items}
    return Completion(owned=len(owned), total=len(catalog.codes))


def _code_of(item: CollectionItem | EnrichedItem) -> str:
    if isinstance(item, EnrichedItem):
        return item.card_code
    return item.card_code.upper()


def missing_cards(
    catalog: Catalog,
    set_code: str,
    owned_codes: set[str] | frozenset[str],
    query: str = "",
) -> list[CatalogEntry]:
    """
    Catalog cards of a set not yet owned, sorted by code.

    Args:
        catalog: Loaded catalog
        set_code: Set to list (case-insensitive)
        owned_codes: Codes already owned (any case)
        query: Optional code/name substring filter
    """
    owned = {c.upper() for c in owned_codes}
    q = query.strip().lower()

    result: list[CatalogEntry] = []
    for entry in catalog.entries_for_set(set_code):
        if entry.code.upper() in owned:
            continue
        if q and q not in entry.code.lower() and q not in entry.name.lower():
            continue
        result.append(entry)
    return result


def collection_stats(items: list[EnrichedItem]) -> CollectionStats:
    """Total quantity, line count, estimated value and unpriced quantity."""
    total_cards = 0
    estimated_value = 0.0
    missing_price = 0

    for it in items:
        total_cards += it.qty
        if it.market_price is None:
            missing_price += it.qty
        else:
            estimated_value += it.qty * it.market_price

    return CollectionStats(
        total_cards=total_cards,
        unique_items=len(items),
        estimated_value=estimated_value,
        missing_price=missing_price,
    )


def build_collection_view(
    items: list[CollectionItem],
    catalog: Catalog,
    prices: list[PriceEntry],
    query: str = "",
) -> CollectionView:
    """
    Full reconciliation for one collection.

    Stats and global completion cover every item; groups honor `query`.
    """
    enriched = enrich_items(items, catalog, prices)
    visible = filter_items(enriched, query)

    return CollectionView(
        items=visible,
        groups=group_by_set(visible, catalog),
        stats=collection_stats(enriched),
        completion=global_completion(enriched, catalog),
        query=query,
    )
