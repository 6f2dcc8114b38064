"""
Runtime access to the built catalog.

The artifact is loaded once per process through an explicit CatalogCache and
exposed as an immutable Catalog with lookup, search and per-set indexes.
"""

import asyncio
import json
import logging
from functools import cached_property, lru_cache
from pathlib import Path

import httpx

from cardbinder.catalog.builder import parse_catalog_payload
from cardbinder.catalog.normalize import UNKNOWN_SET
from cardbinder.config import SEARCH_DEFAULT_LIMIT, settings
from cardbinder.models.catalog import CatalogEntry
from cardbinder.models.failure import CatalogUnavailableError

logger = logging.getLogger(__name__)


def set_key(set_code: str | None) -> str:
    """Grouping key for a set code: upper-cased, UNKNOWN when missing."""
    return (set_code or "").strip().upper() or UNKNOWN_SET


class Catalog:
    """Read-only view over catalog entries in their stored (code-ascending) order."""

    def __init__(self, entries: list[CatalogEntry]) -> None:
        self._entries = tuple(entries)
        self._by_code: dict[str, CatalogEntry] = {}
        for entry in self._entries:
            self._by_code.setdefault(entry.code.upper(), entry)

    @property
    def entries(self) -> tuple[CatalogEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def lookup_by_code(self, code: str) -> CatalogEntry | None:
        """Case-insensitive exact match on code."""
        return self._by_code.get(code.strip().upper())

    def exists(self, code: str) -> bool:
        """Whether a code is in the catalog (case-insensitive)."""
        return code.strip().upper() in self._by_code

    @property
    def codes(self) -> frozenset[str]:
        return frozenset(self._by_code)

    def search(
        self, query: str, limit: int = SEARCH_DEFAULT_LIMIT, offset: int = 0
    ) -> list[CatalogEntry]:
        """
        Case-insensitive substring search for autocomplete.

        Matches code, name, set, set name, type and any trait. Results keep
        catalog order, so successive offsets page through a stable list.
        An empty or whitespace-only query returns nothing.
        """
        q = query.strip().lower()
        if not q or limit <= 0:
            return []

        offset = max(offset, 0)
        results: list[CatalogEntry] = []
        skipped = 0
        for entry in self._entries:
            if not _matches(entry, q):
                continue
            if skipped < offset:
                skipped += 1
                continue
            results.append(entry)
            if len(results) >= limit:
                break

        return results

    @cached_property
    def set_totals(self) -> dict[str, int]:
        """Upper-cased set code -> number of catalog cards in that set."""
        totals: dict[str, int] = {}
        for entry in self._entries:
            key = set_key(entry.set)
            totals[key] = totals.get(key, 0) + 1
        return totals

    @cached_property
    def set_names(self) -> dict[str, str]:
        """Upper-cased set code -> first set title seen for it."""
        names: dict[str, str] = {}
        for entry in self._entries:
            key = set_key(entry.set)
            if entry.set_name and key not in names:
                names[key] = entry.set_name
        return names

    def entries_for_set(self, set_code: str) -> list[CatalogEntry]:
        """Catalog entries of one set, sorted by code."""
        key = set_key(set_code)
        return sorted(
            (e for e in self._entries if set_key(e.set) == key),
            key=lambda e: e.code,
        )


def _matches(entry: CatalogEntry, q: str) -> bool:
    for value in (entry.code, entry.name, entry.set, entry.set_name, entry.type):
        if value and q in value.lower():
            return True
    return any(q in trait.lower() for trait in entry.traits)


class CatalogCache:
    """
    Load-once holder for the catalog artifact.

    The first `load()` reads the source (file path or http(s) URL); concurrent
    first callers wait on the same lock and share that single read. Later
    calls return the same Catalog object until `reset()` is called.
    """

    def __init__(self, source: str | Path) -> None:
        self.source = str(source)
        self._catalog: Catalog | None = None
        self._lock = asyncio.Lock()
        self.load_count = 0

    @property
    def loaded(self) -> bool:
        return self._catalog is not None

    async def load(self) -> Catalog:
        """
        Get the catalog, reading the source on first use.

        Raises:
            CatalogUnavailableError: If the source is missing, unreadable or empty
        """
        if self._catalog is not None:
            return self._catalog

        async with self._lock:
            if self._catalog is None:
                entries = await self._read_source()
                self.load_count += 1
                self._catalog = Catalog(entries)
                logger.info("Loaded %d catalog entries from %s", len(entries), self.source)

        return self._catalog

    def reset(self) -> None:
        """Forget the cached catalog; the next load reads the source again."""
        self._catalog = None

    async def _read_source(self) -> list[CatalogEntry]:
        if self.source.startswith(("http://", "https://")):
            data = await self._fetch_remote()
        else:
            data = self._read_file(Path(self.source))

        try:
            entries = parse_catalog_payload(data)
        except ValueError as e:
            raise CatalogUnavailableError(self.source, str(e)) from e

        if not entries:
            raise CatalogUnavailableError(self.source, "catalog is empty")
        return entries

    async def _fetch_remote(self) -> object:
        try:
            async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
                response = await client.get(self.source)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            raise CatalogUnavailableError(self.source, f"request failed: {e}") from e
        except ValueError as e:
            raise CatalogUnavailableError(self.source, "response is not valid JSON") from e

    def _read_file(self, path: Path) -> object:
        if not path.is_file():
            raise CatalogUnavailableError(self.source, "file not found")
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise CatalogUnavailableError(self.source, f"unreadable: {e}") from e
        except json.JSONDecodeError as e:
            raise CatalogUnavailableError(self.source, f"corrupted JSON: {e}") from e


@lru_cache(maxsize=1)
def get_catalog_cache() -> CatalogCache:
    """
    Process-wide catalog cache built from settings.

    Used as a FastAPI dependency; tests override it or call
    `get_catalog_cache.cache_clear()`.
    """
    return CatalogCache(settings.catalog_source)


async def get_catalog() -> Catalog:
    """FastAPI dependency returning the loaded catalog."""
    return await get_catalog_cache().load()
