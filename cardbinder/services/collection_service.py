"""
Collection mutations: add, adjust, remove and bulk CSV imports.

Every write goes through db.operations and is committed before the
function returns, so a success result means the change is persisted.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from cardbinder.catalog.store import Catalog
from cardbinder.config import INVALID_CODE_SAMPLE
from cardbinder.db.operations import (
    bulk_upsert_items,
    bulk_upsert_prices,
    delete_item,
    get_active_collection_id,
    get_item,
    list_items,
    upsert_item,
)
from cardbinder.models.collection import (
    CardCondition,
    CardLanguage,
    CardVariant,
    CollectionItem,
    IdentityKey,
    identity_key,
    new_id,
    now_utc,
)
from cardbinder.models.failure import InvalidImportError, ItemNotFoundError, UnknownCardError
from cardbinder.parsers.collection_csv import CollectionRow, parse_collection_csv
from cardbinder.parsers.price_csv import parse_price_csv

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Outcome of a CSV import."""

    ok: bool
    status: str
    errors: list[str] = field(default_factory=list)
    rows: int = 0
    upserted: int = 0


async def add_card(
    session: AsyncSession,
    catalog: Catalog,
    code: str,
    qty: int = 1,
    variant: CardVariant = CardVariant.NORMAL,
    condition: CardCondition = CardCondition.NM,
    language: CardLanguage = CardLanguage.EN,
    collection_id: str | None = None,
) -> CollectionItem:
    """
    Add copies of a catalog card to the active collection.

    Merges into the existing line with the same identity key, otherwise
    creates a new line.

    Raises:
        UnknownCardError: If the code is not in the catalog
        InvalidImportError: If qty is not positive
    """
    code = code.strip().upper()
    if not catalog.exists(code):
        raise UnknownCardError([code])
    if qty <= 0:
        raise InvalidImportError("Quantity must be a positive whole number.", detail=str(qty))

    collection_id = collection_id or await get_active_collection_id(session)
    key = identity_key(code, variant, condition, language)
    now = now_utc()

    existing = next(
        (it for it in await list_items(session, collection_id) if it.identity_key == key),
        None,
    )
    if existing:
        item = replace(existing, qty=existing.qty + qty, updated_at=now)
    else:
        item = CollectionItem(
            id=new_id("item"),
            collection_id=collection_id,
            card_code=code,
            qty=qty,
            variant=variant,
            condition=condition,
            language=language,
            created_at=now,
            updated_at=now,
        )

    await upsert_item(session, item)
    await session.commit()
    logger.info("Added %d x %s to collection %s", qty, code, collection_id)
    return item


async def adjust_quantity(
    session: AsyncSession, item_id: str, delta: int
) -> CollectionItem | None:
    """
    Change an item's quantity by `delta`.

    A resulting quantity of zero or less deletes the item and returns None.

    Raises:
        ItemNotFoundError: If the item doesn't exist
    """
    item = await get_item(session, item_id)
    if item is None:
        raise ItemNotFoundError(item_id)

    new_qty = item.qty + delta
    if new_qty <= 0:
        await delete_item(session, item_id)
        await session.commit()
        logger.info("Removed item %s (%s)", item_id, item.card_code)
        return None

    updated = replace(item, qty=new_qty, updated_at=now_utc())
    await upsert_item(session, updated)
    await session.commit()
    return updated


async def remove_item(session: AsyncSession, item_id: str) -> None:
    """
    Delete an item.

    Raises:
        ItemNotFoundError: If the item doesn't exist
    """
    if not await delete_item(session, item_id):
        raise ItemNotFoundError(item_id)
    await session.commit()


def plan_import(
    existing: list[CollectionItem],
    rows: list[CollectionRow],
    collection_id: str,
    now: datetime,
) -> list[CollectionItem]:
    """
    Merge import rows into a snapshot of existing items.

    Rows sharing an identity key fold into one item: the matching existing
    item with quantities added, or a single new item. Returns one item per
    touched key, in first-seen order.
    """
    by_key: dict[IdentityKey, CollectionItem] = {it.identity_key: it for it in existing}
    touched: dict[IdentityKey, CollectionItem] = {}

    for row in rows:
        key = identity_key(row.code, row.variant, row.condition, row.language)
        current = touched.get(key) or by_key.get(key)
        if current is None:
            touched[key] = CollectionItem(
                id=new_id("item"),
                collection_id=collection_id,
                card_code=row.code,
                qty=row.qty,
                variant=row.variant,
                condition=row.condition,
                language=row.language,
                created_at=now,
                updated_at=now,
            )
        else:
            touched[key] = replace(current, qty=current.qty + row.qty, updated_at=now)

    return list(touched.values())


async def import_collection(session: AsyncSession, catalog: Catalog, text: str) -> ImportResult:
    """
    Import collection CSV text into the active collection.

    Every code is validated against the catalog before anything is written;
    a single unknown code rejects the whole import.

    Raises:
        ImportTooLargeError: If the text has too many data lines
        InvalidImportError: If the required columns are missing
    """
    rows = parse_collection_csv(text)
    if not rows:
        return ImportResult(ok=False, status="No valid rows found.", rows=0)

    invalid = sorted({row.code for row in rows if not catalog.exists(row.code)})
    if invalid:
        sample = invalid[:INVALID_CODE_SAMPLE]
        logger.warning("Rejected import: %d unknown codes", len(invalid))
        return ImportResult(
            ok=False,
            status=f"Import rejected: {len(invalid)} card codes not found in the catalog.",
            errors=[f"Unknown card code: {code}" for code in sample],
            rows=len(rows),
        )

    collection_id = await get_active_collection_id(session)
    existing = await list_items(session, collection_id)
    planned = plan_import(existing, rows, collection_id, now_utc())

    upserted = await bulk_upsert_items(session, planned)
    await session.commit()
    logger.info("Imported %d rows into %d items", len(rows), upserted)

    return ImportResult(
        ok=True,
        status=f"Imported {len(rows)} rows ({upserted} items updated).",
        rows=len(rows),
        upserted=upserted,
    )


async def import_prices(session: AsyncSession, text: str) -> ImportResult:
    """Import price overlay CSV text; each code's entry is replaced wholesale."""
    entries = parse_price_csv(text)
    if not entries:
        return ImportResult(ok=False, status="No valid price rows found.")

    upserted = await bulk_upsert_prices(session, entries)
    await session.commit()
    logger.info("Imported %d price entries", upserted)

    return ImportResult(
        ok=True,
        status=f"Imported {upserted} prices.",
        rows=len(entries),
        upserted=upserted,
    )
