"""
Deduplication of catalog entries by card code.

Merging is table-driven: each CatalogEntry field has a rule saying whether a
later record overwrites it or whether an already-known value is kept.
"""

from dataclasses import fields, replace
from enum import Enum
from typing import Any

from cardbinder.models.catalog import CatalogEntry


class FieldRule(str, Enum):
    """How a later record's value is combined with an earlier one."""

    OVERWRITE = "overwrite"
    OVERWRITE_IF_PRESENT = "overwrite_if_present"
    KEEP_IF_PRESENT = "keep_if_present"


class MergeStrategy(str, Enum):
    """Policy applied when two records share a code."""

    FIELD_MERGE = "field_merge"
    FIRST_WINS = "first_wins"


# Descriptive metadata a later record may not blank out
PROTECTED_FIELDS = frozenset(
    {
        "image_url",
        "set_name",
        "rarity",
        "color",
        "type",
        "cost",
        "power",
        "pack_id",
        "set",
    }
)

# Replaced by a later record only when it carries a value
REFRESHABLE_FIELDS = frozenset({"name", "traits"})


def _rule_for(name: str) -> FieldRule:
    if name in PROTECTED_FIELDS:
        return FieldRule.KEEP_IF_PRESENT
    if name in REFRESHABLE_FIELDS:
        return FieldRule.OVERWRITE_IF_PRESENT
    return FieldRule.OVERWRITE


EXPORT_MERGE_POLICY: dict[str, FieldRule] = {f.name: _rule_for(f.name) for f in fields(CatalogEntry)}


def _present(value: Any) -> bool:
    return value is not None and value != "" and value != ()


def merge_entries(
    prev: CatalogEntry,
    new: CatalogEntry,
    policy: dict[str, FieldRule] = EXPORT_MERGE_POLICY,
) -> CatalogEntry:
    """
    Merge two entries for the same code.

    OVERWRITE fields take the new record's value. OVERWRITE_IF_PRESENT fields
    take it only when it is non-empty. KEEP_IF_PRESENT fields keep the
    previous value when it is non-empty and only fall back to the new one
    otherwise. Fields missing from the policy are overwritten.
    """
    changes: dict[str, Any] = {}
    for f in fields(CatalogEntry):
        rule = policy.get(f.name, FieldRule.OVERWRITE)
        prev_value = getattr(prev, f.name)
        new_value = getattr(new, f.name)

        if rule is FieldRule.KEEP_IF_PRESENT and _present(prev_value):
            changes[f.name] = prev_value
        elif rule is FieldRule.OVERWRITE_IF_PRESENT and not _present(new_value):
            changes[f.name] = prev_value
        else:
            changes[f.name] = new_value

    return replace(prev, **changes)


class CatalogAccumulator:
    """Collects entries keyed by upper-cased code under one merge strategy."""

    def __init__(
        self,
        strategy: MergeStrategy = MergeStrategy.FIELD_MERGE,
        policy: dict[str, FieldRule] = EXPORT_MERGE_POLICY,
    ) -> None:
        self.strategy = strategy
        self.policy = policy
        self._by_code: dict[str, CatalogEntry] = {}

    def add(self, entry: CatalogEntry) -> None:
        """Add an entry, merging with any existing entry for its code."""
        key = entry.code.upper()
        prev = self._by_code.get(key)

        if prev is None:
            self._by_code[key] = entry
        elif self.strategy is MergeStrategy.FIELD_MERGE:
            self._by_code[key] = merge_entries(prev, entry, self.policy)
        # FIRST_WINS: the first record for a code is kept verbatim

    def __len__(self) -> int:
        return len(self._by_code)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._by_code

    def entries(self) -> list[CatalogEntry]:
        """All entries sorted ascending by code; unnamed entries take their code."""
        return [
            entry if entry.name else replace(entry, name=entry.code)
            for entry in sorted(self._by_code.values(), key=lambda e: e.code)
        ]
