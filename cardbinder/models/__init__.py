from cardbinder.models.catalog import CatalogEntry
from cardbinder.models.collection import (
    GAME_SLUG,
    AppState,
    CardCondition,
    CardLanguage,
    CardVariant,
    Collection,
    CollectionItem,
    PriceEntry,
    identity_key,
    new_id,
    now_utc,
)
from cardbinder.models.failure import (
    CatalogUnavailableError,
    FailureDetail,
    FailureKind,
    ImportTooLargeError,
    InvalidImportError,
    ItemNotFoundError,
    KnownError,
    LayoutNotRecognizedError,
    UnknownCardError,
)

__all__ = [
    "AppState",
    "CardCondition",
    "CardLanguage",
    "CardVariant",
    "CatalogEntry",
    "CatalogUnavailableError",
    "Collection",
    "CollectionItem",
    "FailureDetail",
    "FailureKind",
    "GAME_SLUG",
    "ImportTooLargeError",
    "InvalidImportError",
    "ItemNotFoundError",
    "KnownError",
    "LayoutNotRecognizedError",
    "PriceEntry",
    "UnknownCardError",
    "identity_key",
    "new_id",
    "now_utc",
]
