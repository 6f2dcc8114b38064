"""
Canonical catalog entry.

One CatalogEntry exists per card code in the built catalog artifact.
Entries are frozen: the catalog is only ever rebuilt offline.
"""

from dataclasses import dataclass
from typing import Any

# Python attribute -> artifact JSON key
JSON_KEYS: dict[str, str] = {
    "code": "code",
    "name": "name",
    "set": "set",
    "set_name": "setName",
    "pack_id": "packId",
    "rarity": "rarity",
    "color": "color",
    "type": "type",
    "image_url": "imageUrl",
    "cost": "cost",
    "power": "power",
    "traits": "traits",
    "market_price": "marketPrice",
    "inventory_price": "inventoryPrice",
    "scraped_at": "scrapedAt",
}


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """
    Canonical card record keyed by code.

    Attributes:
        code: Upper-cased card code, e.g. "OP01-077"
        name: Display name (falls back to code)
        set: Short set code, e.g. "OP01"
        set_name: Human-readable set title from pack metadata
        pack_id: Upper-cased vendor pack id the record came from
        color: Slash-joined colors, e.g. "Red/Green"
        cost: Cost as a string, preserving source formatting
        power: Power as a string, preserving source formatting
        traits: Ordered category tags
        market_price: Market price snapshot (online builder only)
        inventory_price: Inventory price snapshot (online builder only)
        scraped_at: When the price snapshot was taken (online builder only)
    """

    code: str
    name: str
    set: str
    set_name: str | None = None
    pack_id: str | None = None
    rarity: str | None = None
    color: str | None = None
    type: str | None = None
    image_url: str | None = None
    cost: str | None = None
    power: str | None = None
    traits: tuple[str, ...] = ()
    market_price: float | None = None
    inventory_price: float | None = None
    scraped_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Artifact JSON form; unset optional fields are omitted."""
        out: dict[str, Any] = {}
        for attr, key in JSON_KEYS.items():
            value = getattr(self, attr)
            if attr == "traits":
                out[key] = list(value)
            elif value is not None:
                out[key] = value
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CatalogEntry":
        """
        Build an entry from its artifact JSON form.

        Only `code` is required; `name` falls back to the code and `set`
        to the code prefix.

        Raises:
            ValueError: If `code` is missing or blank
        """
        raw_code = data.get("code")
        code = str(raw_code).strip().upper() if raw_code is not None else ""
        if not code:
            raise ValueError("Catalog entry is missing 'code'")

        name = data.get("name")
        set_code = data.get("set")
        traits = data.get("traits") or []

        return cls(
            code=code,
            name=str(name) if name else code,
            set=str(set_code) if set_code else code.split("-")[0],
            set_name=data.get("setName"),
            pack_id=data.get("packId"),
            rarity=data.get("rarity"),
            color=data.get("color"),
            type=data.get("type"),
            image_url=data.get("imageUrl"),
            cost=data.get("cost"),
            power=data.get("power"),
            traits=tuple(str(t) for t in traits if t),
            market_price=_as_float(data.get("marketPrice")),
            inventory_price=_as_float(data.get("inventoryPrice")),
            scraped_at=data.get("scrapedAt"),
        )


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
