"""
Collection card models.

A ManaBox export lists one row per printing the user owns. Every printing
sits in exactly one binder, and a binder is either a loose collection
binder or a Commander deck.

All models are frozen: the catalog is read-only once imported.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any


class BinderType(str, Enum):
    """Where a printing is kept."""

    BINDER = "binder"
    DECK = "deck"


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    One printing of a card owned by the user.

    Only `name`, `binder_name` and `binder_type` take part in matching.
    Everything else is carried through untouched.

    Attributes:
        binder_name: Binder or deck the printing sits in
        binder_type: BINDER for collection binders, DECK for Commander decks
        name: Card name, the searchable key
        set_code: Set code (e.g., "C20")
        set_name: Full set name (e.g., "Commander 2020")
        collector_number: Collector number within the set
        foil: Finish ("normal", "foil", "etched")
        rarity: Printed rarity
        quantity: Copies of this printing in this binder
        manabox_id: ManaBox's numeric card id
        scryfall_id: Scryfall UUID of the printing
        purchase_price: Price paid per copy
        misprint: Flagged as a misprint
        altered: Flagged as altered
        condition: Condition label (e.g., "near_mint")
        language: Language code (e.g., "en")
        purchase_price_currency: Currency of purchase_price (e.g., "USD")
    """

    binder_name: str
    binder_type: BinderType
    name: str
    set_code: str = ""
    set_name: str = ""
    collector_number: str = ""
    foil: str = "normal"
    rarity: str = "common"
    quantity: int = 1
    manabox_id: int = 0
    scryfall_id: str = ""
    purchase_price: Decimal = Decimal("0")
    misprint: bool = False
    altered: bool = False
    condition: str = "near_mint"
    language: str = "en"
    purchase_price_currency: str = "USD"


@dataclass(frozen=True, slots=True)
class CardSummary:
    """Lean projection of a record returned by search and deck lookups."""

    binder_type: BinderType
    binder_name: str
    quantity: int
    name: str
    scryfall_id: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "binderType": self.binder_type.value,
            "binderName": self.binder_name,
            "quantity": self.quantity,
            "name": self.name,
            "scryfallId": self.scryfall_id,
        }


@dataclass(frozen=True, slots=True)
class DeckSummary:
    """A Commander deck with the total number of cards in it."""

    name: str
    card_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "cardCount": self.card_count}


@dataclass(frozen=True, slots=True)
class DeckContents:
    """
    Cards of a deck found by fuzzy name lookup.

    `resolved_name` is the deck name actually matched, which can differ
    from what the caller typed.
    """

    resolved_name: str
    cards: list[CardSummary] = field(default_factory=list)
