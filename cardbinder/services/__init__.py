from cardbinder.services.collection_service import (
    ImportResult,
    add_card,
    adjust_quantity,
    import_collection,
    import_prices,
    plan_import,
    remove_item,
)
from cardbinder.services.reconciliation import (
    CollectionStats,
    CollectionView,
    Completion,
    EnrichedItem,
    SetGroup,
    build_collection_view,
    collection_stats,
    enrich_items,
    filter_items,
    global_completion,
    group_by_set,
    missing_cards,
)

__all__ = [
    "CollectionStats",
    "CollectionView",
    "Completion",
    "EnrichedItem",
    "ImportResult",
    "SetGroup",
    "add_card",
    "adjust_quantity",
    "build_collection_view",
    "collection_stats",
    "enrich_items",
    "filter_items",
    "global_completion",
    "group_by_set",
    "import_collection",
    "import_prices",
    "missing_cards",
    "plan_import",
    "remove_item",
]
