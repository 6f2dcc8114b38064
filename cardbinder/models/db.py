"""
SQLAlchemy ORM models for the local store.

Models mirror the dataclass models but add database persistence.
"""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class AppStateDB(Base):
    """Single-row table holding the active collection pointer."""

    __tablename__ = "app_state"

    key: Mapped[str] = mapped_column(String(32), primary_key=True, default="state")
    version: Mapped[int] = mapped_column(Integer, default=1)
    active_collection_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<AppStateDB(active={self.active_collection_id})>"


class CollectionDB(Base):
    """A named collection of owned cards."""

    __tablename__ = "collections"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    tcg: Mapped[str] = mapped_column(String(32))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    items: Mapped[list["CollectionItemDB"]] = relationship(
        back_populates="collection", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<CollectionDB(id={self.id}, name={self.name})>"


class CollectionItemDB(Base):
    """
    One stock line: card code plus physical attributes and quantity.

    Identity (card_code, variant, condition, language) is enforced by the
    import logic, not by a constraint, so a snapshot merge can fold rows.
    """

    __tablename__ = "collection_items"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    collection_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("collections.id", ondelete="CASCADE"), index=True
    )
    card_code: Mapped[str] = mapped_column(String(32), index=True)
    qty: Mapped[int] = mapped_column(Integer)
    variant: Mapped[str] = mapped_column(String(16))
    condition: Mapped[str] = mapped_column(String(8))
    language: Mapped[str] = mapped_column(String(8))
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    collection: Mapped["CollectionDB"] = relationship(back_populates="items")

    def __repr__(self) -> str:
        return f"<CollectionItemDB(code={self.card_code}, qty={self.qty})>"


class PriceEntryDB(Base):
    """Price overlay row, one per card code."""

    __tablename__ = "prices"

    card_code: Mapped[str] = mapped_column(String(32), primary_key=True)
    trend_eur: Mapped[float | None] = mapped_column(Float, nullable=True)
    avg30_eur: Mapped[float | None] = mapped_column(Float, nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_error_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<PriceEntryDB(code={self.card_code}, trend={self.trend_eur})>"
