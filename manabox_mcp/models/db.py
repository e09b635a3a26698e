"""
SQLAlchemy ORM models for persistent storage.

The whole catalog is a single flat table. It is replaced wholesale on
every import, so there are no relationships and no migrations.
"""

from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CardDB(Base):
    """
    One owned printing from the ManaBox export.

    Multiple rows may share a name (different printings, or the same
    printing in several binders) and a binder name (every card in a deck).
    """

    __tablename__ = "cards"
    __table_args__ = (
        CheckConstraint("binder_type IN ('binder', 'deck')", name="ck_cards_binder_type"),
        CheckConstraint("quantity >= 0", name="ck_cards_quantity"),
        Index("ix_cards_name", "name"),
        Index("ix_cards_binder", "binder_name", "binder_type"),
        Index("ix_cards_scryfall_id", "scryfall_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    binder_name: Mapped[str] = mapped_column(String(255))
    binder_type: Mapped[str] = mapped_column(String(16))
    name: Mapped[str] = mapped_column(String(255))
    set_code: Mapped[str] = mapped_column(String(16), default="")
    set_name: Mapped[str] = mapped_column(String(255), default="")
    collector_number: Mapped[str] = mapped_column(String(32), default="")
    foil: Mapped[str] = mapped_column(String(16), default="normal")
    rarity: Mapped[str] = mapped_column(String(32), default="common")
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    manabox_id: Mapped[int] = mapped_column(Integer, default=0)
    scryfall_id: Mapped[str] = mapped_column(String(64), default="")
    purchase_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    misprint: Mapped[bool] = mapped_column(Boolean, default=False)
    altered: Mapped[bool] = mapped_column(Boolean, default=False)
    condition: Mapped[str] = mapped_column(String(32), default="")
    language: Mapped[str] = mapped_column(String(16), default="")
    purchase_price_currency: Mapped[str] = mapped_column(String(8), default="")

    def __repr__(self) -> str:
        return f"<CardDB(name={self.name}, binder={self.binder_name}, qty={self.quantity})>"
