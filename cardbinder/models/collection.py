import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

GAME_SLUG = "onepiece"


class CardVariant(str, Enum):
    """Print variant of a physical copy."""

    NORMAL = "normal"
    ALT = "alt"
    PARALLEL = "parallel"

    @classmethod
    def parse(cls, value: str | None) -> "CardVariant":
        """Lenient parse; unknown values fall back to normal."""
        text = (value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        return cls.NORMAL


class CardCondition(str, Enum):
    """Physical condition grade."""

    NM = "NM"
    LP = "LP"
    MP = "MP"
    HP = "HP"

    @classmethod
    def parse(cls, value: str | None) -> "CardCondition":
        """Lenient parse; unknown values fall back to NM."""
        text = (value or "").strip().upper()
        for member in cls:
            if member.value == text:
                return member
        return cls.NM


class CardLanguage(str, Enum):
    """Print language of a physical copy."""

    EN = "EN"
    JP = "JP"
    PT = "PT"
    ES = "ES"
    FR = "FR"
    DE = "DE"
    IT = "IT"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str | None) -> "CardLanguage":
        """Lenient parse; unknown values fall back to EN."""
        text = (value or "").strip().upper()
        for member in cls:
            if member.value == text:
                return member
        return cls.EN


IdentityKey = tuple[str, CardVariant, CardCondition, CardLanguage]


def now_utc() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(UTC)


def new_id(prefix: str = "id") -> str:
    """Generate a unique record id like `item_3f2a...`."""
    return f"{prefix}_{uuid.uuid4().hex}"


def identity_key(
    card_code: str,
    variant: CardVariant,
    condition: CardCondition,
    language: CardLanguage,
) -> IdentityKey:
    """Stock-line identity used to merge imports into existing items."""
    return (card_code.strip().upper(), variant, condition, language)


@dataclass
class Collection:
    """A named container of owned stock."""

    id: str
    name: str
    tcg: str = GAME_SLUG
    created_at: datetime = field(default_factory=now_utc)
    updated_at: datetime = field(default_factory=now_utc)


@dataclass
class CollectionItem:
    """
    One stock line in a collection.

    Two items sharing (card_code, variant, condition, language) are the same
    line; quantities add on import. An item is never stored with qty <= 0.
    """

    id: str
    collection_id: str
    card_code: str
    qty: int
    variant: CardVariant = CardVariant.NORMAL
    condition: CardCondition = CardCondition.NM
    language: CardLanguage = CardLanguage.EN
    note: str | None = None
    created_at: datetime = field(default_factory=now_utc)
    updated_at: datetime = field(default_factory=now_utc)

    @property
    def identity_key(self) -> IdentityKey:
        return identity_key(self.card_code, self.variant, self.condition, self.language)


@dataclass
class AppState:
    """Single record tracking which collection is active."""

    version: int = 1
    active_collection_id: str | None = None


@dataclass
class PriceEntry:
    """
    Market price snapshot for one card code.

    Overlays the catalog's baked-in market price. `last_error` and
    `last_error_at` record the most recent failed refresh; previous
    prices are kept when a refresh fails.
    """

    card_code: str
    trend_eur: float | None
    avg30_eur: float | None
    updated_at: datetime | None = field(default_factory=now_utc)
    url: str | None = None
    last_error: str | None = None
    last_error_at: datetime | None = None
