from cardbinder.catalog.builder import (
    BuildReport,
    build_catalog,
    read_catalog_file,
    write_catalog,
)
from cardbinder.catalog.layout import LayoutKind, SourceLayout, detect_layout, list_card_files
from cardbinder.catalog.merge import (
    EXPORT_MERGE_POLICY,
    PROTECTED_FIELDS,
    CatalogAccumulator,
    FieldRule,
    MergeStrategy,
    merge_entries,
)
from cardbinder.catalog.online import OnlineBuildReport, build_catalog_online
from cardbinder.catalog.store import Catalog, CatalogCache, get_catalog, get_catalog_cache

__all__ = [
    "BuildReport",
    "Catalog",
    "CatalogAccumulator",
    "CatalogCache",
    "EXPORT_MERGE_POLICY",
    "FieldRule",
    "LayoutKind",
    "MergeStrategy",
    "OnlineBuildReport",
    "PROTECTED_FIELDS",
    "SourceLayout",
    "build_catalog",
    "build_catalog_online",
    "detect_layout",
    "get_catalog",
    "get_catalog_cache",
    "list_card_files",
    "merge_entries",
    "read_catalog_file",
    "write_catalog",
]
