"""
Raw card record -> CatalogEntry normalization.

Two vendor shapes are supported: local card-data exports (punk-records style,
keyed by `id`) and the card-data API (keyed by `card_set_id`).
"""

from typing import Any

from cardbinder.models.catalog import CatalogEntry

UNKNOWN_SET = "UNKNOWN"


def clean_str(value: Any) -> str | None:
    """Stripped string form of a value, or None for null/blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def infer_set(code: str | None) -> str:
    """Set code from the first `-` segment of a card code, e.g. OP01-077 -> OP01."""
    cleaned = clean_str(code)
    if not cleaned:
        return UNKNOWN_SET
    return cleaned.upper().split("-")[0] or UNKNOWN_SET


def _str_or_none(value: Any) -> str | None:
    # Keeps numeric formatting ("05", "5000") without enforcing a type
    if value is None:
        return None
    return str(value)


def _float_or_none(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def normalize_export_card(
    raw: dict[str, Any], pack_titles: dict[str, str], name_fallback: bool = True
) -> CatalogEntry | None:
    """
    Normalize one card record from a local export.

    Args:
        raw: Card record as decoded from JSON
        pack_titles: Pack id -> set title mapping
        name_fallback: Name an unnamed record after its code. When False the
            name is left empty so a merge can tell it apart from a real one.

    Returns:
        CatalogEntry, or None if the record has no usable id.
    """
    code = clean_str(raw.get("id"))
    if not code:
        return None
    code = code.upper()

    pack_id = clean_str(raw.get("pack_id"))
    pack_id = pack_id.upper() if pack_id else None

    explicit_set = clean_str(raw.get("set"))
    set_code = explicit_set.upper() if explicit_set else infer_set(code)

    set_name = pack_titles.get(pack_id) if pack_id else None

    colors = raw.get("colors")
    color_list = [str(c).strip() for c in colors if c] if isinstance(colors, list) else []

    traits: tuple[str, ...] = ()
    types = raw.get("types")
    if isinstance(types, list):
        traits = tuple(s for s in (str(t).strip() for t in types if t is not None) if s)

    return CatalogEntry(
        code=code,
        name=clean_str(raw.get("name")) or (code if name_fallback else ""),
        set=set_code,
        set_name=set_name,
        pack_id=pack_id,
        rarity=clean_str(raw.get("rarity")),
        color="/".join(color_list) if color_list else None,
        type=clean_str(raw.get("category")),
        image_url=clean_str(raw.get("img_full_url")) or clean_str(raw.get("img_url")),
        cost=_str_or_none(raw.get("cost")),
        power=_str_or_none(raw.get("power")),
        traits=traits,
    )


def normalize_api_card(raw: dict[str, Any]) -> CatalogEntry | None:
    """
    Normalize one record from the card-data API.

    Both a code (card_set_id, card_image_id, card_id or id) and a name
    (card_name or name) are required.
    """
    code = None
    for key in ("card_set_id", "card_image_id", "card_id", "id"):
        code = clean_str(raw.get(key))
        if code:
            break
    name = clean_str(raw.get("card_name")) or clean_str(raw.get("name"))
    if not code or not name:
        return None
    code = code.upper()

    # set_id arrives as "OP-01"; the code prefix ("OP01") is the fallback
    set_code = clean_str(raw.get("set_id")) or infer_set(code)

    return CatalogEntry(
        code=code,
        name=name,
        set=set_code,
        set_name=clean_str(raw.get("set_name")),
        rarity=clean_str(raw.get("rarity")),
        color=clean_str(raw.get("card_color")),
        type=clean_str(raw.get("card_type")),
        image_url=clean_str(raw.get("card_image")),
        cost=_str_or_none(raw.get("card_cost")),
        power=_str_or_none(raw.get("card_power")),
        market_price=_float_or_none(raw.get("market_price")),
        inventory_price=_float_or_none(raw.get("inventory_price")),
        scraped_at=clean_str(raw.get("date_scraped")),
    )
