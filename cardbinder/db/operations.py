"""
Local store CRUD operations.

Async functions over an AsyncSession that take and return the domain
dataclasses; ORM rows never leave this module. Writes are flushed, and
callers commit before reporting success.
"""

from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cardbinder.models.collection import (
    GAME_SLUG,
    AppState,
    CardCondition,
    CardLanguage,
    CardVariant,
    Collection,
    CollectionItem,
    PriceEntry,
    new_id,
    now_utc,
)
from cardbinder.models.db import AppStateDB, CollectionDB, CollectionItemDB, PriceEntryDB

APP_STATE_KEY = "state"
DEFAULT_COLLECTION_NAME = "My collection"


def _aware(value: datetime | None) -> datetime | None:
    # SQLite returns naive datetimes; everything is stored as UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


# --- App State Operations ---


async def get_app_state(session: AsyncSession) -> AppState:
    """Get the app state record, or a fresh one if none is stored."""
    row = await session.get(AppStateDB, APP_STATE_KEY)
    if row is None:
        return AppState()
    return AppState(version=row.version, active_collection_id=row.active_collection_id)


async def set_app_state(session: AsyncSession, state: AppState) -> None:
    """Write the app state record."""
    row = await session.get(AppStateDB, APP_STATE_KEY)
    if row is None:
        session.add(
            AppStateDB(
                key=APP_STATE_KEY,
                version=state.version,
                active_collection_id=state.active_collection_id,
            )
        )
    else:
        row.version = state.version
        row.active_collection_id = state.active_collection_id
    await session.flush()


# --- Collection Operations ---


def _collection_from_row(row: CollectionDB) -> Collection:
    return Collection(
        id=row.id,
        name=row.name,
        tcg=row.tcg,
        created_at=_aware(row.created_at) or now_utc(),
        updated_at=_aware(row.updated_at) or now_utc(),
    )


async def list_collections(session: AsyncSession) -> list[Collection]:
    """All collections, oldest first."""
    result = await session.execute(
        select(CollectionDB).order_by(CollectionDB.created_at, CollectionDB.id)
    )
    return [_collection_from_row(row) for row in result.scalars().all()]


async def get_collection(session: AsyncSession, collection_id: str) -> Collection | None:
    """
    Get a collection by id.

    Returns None if it doesn't exist.
    """
    row = await session.get(CollectionDB, collection_id)
    return _collection_from_row(row) if row else None


async def upsert_collection(session: AsyncSession, collection: Collection) -> None:
    """Insert or update a collection."""
    row = await session.get(CollectionDB, collection.id)
    if row is None:
        session.add(
            CollectionDB(
                id=collection.id,
                name=collection.name,
                tcg=collection.tcg,
                created_at=collection.created_at,
                updated_at=collection.updated_at,
            )
        )
    else:
        row.name = collection.name
        row.tcg = collection.tcg
        row.updated_at = collection.updated_at
    await session.flush()


async def delete_collection(session: AsyncSession, collection_id: str) -> bool:
    """
    Delete a collection and all of its items.

    Clears the active-collection pointer when it names this collection.
    Returns True if deleted, False if not found.
    """
    row = await session.get(CollectionDB, collection_id)
    if row is None:
        return False

    state = await get_app_state(session)
    if state.active_collection_id == collection_id:
        await set_app_state(session, AppState(active_collection_id=None))

    await session.execute(
        delete(CollectionItemDB).where(CollectionItemDB.collection_id == collection_id)
    )
    await session.delete(row)
    await session.flush()
    return True


async def ensure_default_collection(session: AsyncSession) -> Collection:
    """
    Make sure an active collection exists and return it.

    Keeps the active collection when it still exists, otherwise activates
    the oldest collection, otherwise creates a default one.
    """
    state = await get_app_state(session)

    if state.active_collection_id:
        active = await get_collection(session, state.active_collection_id)
        if active:
            return active

    existing = await list_collections(session)
    if existing:
        pick = existing[0]
        await set_app_state(session, AppState(active_collection_id=pick.id))
        return pick

    created_at = now_utc()
    collection = Collection(
        id=new_id("col"),
        name=DEFAULT_COLLECTION_NAME,
        tcg=GAME_SLUG,
        created_at=created_at,
        updated_at=created_at,
    )
    await upsert_collection(session, collection)
    await set_app_state(session, AppState(active_collection_id=collection.id))
    return collection


async def get_active_collection_id(session: AsyncSession) -> str:
    """Id of an existing active collection, creating a default one if needed."""
    collection = await ensure_default_collection(session)
    return collection.id


# --- Item Operations ---


def _item_from_row(row: CollectionItemDB) -> CollectionItem:
    return CollectionItem(
        id=row.id,
        collection_id=row.collection_id,
        card_code=row.card_code,
        qty=row.qty,
        variant=CardVariant(row.variant),
        condition=CardCondition(row.condition),
        language=CardLanguage(row.language),
        note=row.note,
        created_at=_aware(row.created_at) or now_utc(),
        updated_at=_aware(row.updated_at) or now_utc(),
    )


def _apply_item(row: CollectionItemDB, item: CollectionItem) -> None:
    row.collection_id = item.collection_id
    row.card_code = item.card_code
    row.qty = item.qty
    row.variant = item.variant.value
    row.condition = item.condition.value
    row.language = item.language.value
    row.note = item.note
    row.created_at = item.created_at
    row.updated_at = item.updated_at


async def list_items(session: AsyncSession, collection_id: str) -> list[CollectionItem]:
    """All items of a collection, ordered by card code."""
    result = await session.execute(
        select(CollectionItemDB)
        .where(CollectionItemDB.collection_id == collection_id)
        .order_by(CollectionItemDB.card_code, CollectionItemDB.created_at)
    )
    return [_item_from_row(row) for row in result.scalars().all()]


async def get_item(session: AsyncSession, item_id: str) -> CollectionItem | None:
    """Get an item by id, or None."""
    row = await session.get(CollectionItemDB, item_id)
    return _item_from_row(row) if row else None


async def upsert_item(session: AsyncSession, item: CollectionItem) -> None:
    """
    Insert or replace an item by id.

    Raises:
        ValueError: If qty is not positive (zero-quantity lines are deleted instead)
    """
    if item.qty <= 0:
        raise ValueError(f"Refusing to store item {item.id} with qty {item.qty}")

    row = await session.get(CollectionItemDB, item.id)
    if row is None:
        row = CollectionItemDB(id=item.id)
        _apply_item(row, item)
        session.add(row)
    else:
        _apply_item(row, item)
    await session.flush()


async def delete_item(session: AsyncSession, item_id: str) -> bool:
    """
    Delete an item.

    Returns True if deleted, False if not found.
    """
    result = await session.execute(delete(CollectionItemDB).where(CollectionItemDB.id == item_id))
    await session.flush()
    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount) > 0  # type: ignore[attr-defined]


async def bulk_upsert_items(session: AsyncSession, items: list[CollectionItem]) -> int:
    """Upsert many items; returns the number written."""
    for item in items:
        await upsert_item(session, item)
    return len(items)


# --- Price Operations ---


def _price_from_row(row: PriceEntryDB) -> PriceEntry:
    return PriceEntry(
        card_code=row.card_code,
        trend_eur=row.trend_eur,
        avg30_eur=row.avg30_eur,
        updated_at=_aware(row.updated_at),
        url=row.url,
        last_error=row.last_error,
        last_error_at=_aware(row.last_error_at),
    )


async def list_prices(session: AsyncSession) -> list[PriceEntry]:
    """All price overlay entries."""
    result = await session.execute(select(PriceEntryDB).order_by(PriceEntryDB.card_code))
    return [_price_from_row(row) for row in result.scalars().all()]


async def get_price(session: AsyncSession, card_code: str) -> PriceEntry | None:
    """Price entry for a code (case-insensitive), or None."""
    row = await session.get(PriceEntryDB, card_code.strip().upper())
    return _price_from_row(row) if row else None


async def upsert_price(session: AsyncSession, price: PriceEntry) -> None:
    """Insert or fully replace the price entry for a code."""
    code = price.card_code.strip().upper()
    row = await session.get(PriceEntryDB, code)
    if row is None:
        row = PriceEntryDB(card_code=code)
        session.add(row)

    row.trend_eur = price.trend_eur
    row.avg30_eur = price.avg30_eur
    row.updated_at = price.updated_at
    row.url = price.url
    row.last_error = price.last_error
    row.last_error_at = price.last_error_at
    await session.flush()


async def bulk_upsert_prices(session: AsyncSession, prices: list[PriceEntry]) -> int:
    """Upsert many price entries; returns the number written."""
    for price in prices:
        await upsert_price(session, price)
    return len(prices)
