from cardbinder.db.database import get_session, init_db
from cardbinder.db.operations import (
    bulk_upsert_items,
    bulk_upsert_prices,
    delete_collection,
    delete_item,
    ensure_default_collection,
    get_active_collection_id,
    get_app_state,
    get_collection,
    get_item,
    get_price,
    list_collections,
    list_items,
    list_prices,
    set_app_state,
    upsert_collection,
    upsert_item,
    upsert_price,
)

__all__ = [
    "bulk_upsert_items",
    "bulk_upsert_prices",
    "delete_collection",
    "delete_item",
    "ensure_default_collection",
    "get_active_collection_id",
    "get_app_state",
    "get_collection",
    "get_item",
    "get_price",
    "get_session",
    "init_db",
    "list_collections",
    "list_items",
    "list_prices",
    "set_app_state",
    "upsert_collection",
    "upsert_item",
    "upsert_price",
]
