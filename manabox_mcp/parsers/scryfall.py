"""
Scryfall response trimming.

Scryfall card objects carry image URIs, prices, purchase links, artist
credits and more. An assistant only needs the gameplay and deckbuilding
fields, so responses are trimmed before they reach the tool layer.

Card object reference: https://scryfall.com/docs/api/cards
"""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ScryfallCard:
    """Trimmed Scryfall card: only the fields useful for play and deckbuilding."""

    id: str
    name: str
    mana_cost: str
    cmc: float
    type_line: str
    oracle_text: str
    power: str | None
    toughness: str | None
    colors: list[str] = field(default_factory=list)
    color_identity: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    legalities: dict[str, str] = field(default_factory=dict)
    rarity: str = ""
    set_name: str = ""
    set_code: str = ""
    scryfall_uri: str = ""
    edhrec_rank: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize, leaving out fields the card does not have."""
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True, slots=True)
class ScryfallRuling:
    """A single official ruling or note on a card."""

    source: str
    published_at: str
    comment: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ScryfallSearchResult:
    """One page of a Scryfall full-text search (up to 175 cards)."""

    cards: list[ScryfallCard]
    has_more: bool
    total_cards: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "cards": [card.to_dict() for card in self.cards],
            "has_more": self.has_more,
            "total_cards": self.total_cards,
        }


def trim_card_response(raw: dict[str, Any]) -> ScryfallCard:
    """
    Trim a raw Scryfall card object.

    Missing fields fall back to empty values. Power and toughness stay
    None for non-creatures.
    """
    return ScryfallCard(
        id=raw.get("id") or "",
        name=raw.get("name") or "",
        mana_cost=raw.get("mana_cost") or "",
        cmc=raw.get("cmc") or 0,
        type_line=raw.get("type_line") or "",
        oracle_text=raw.get("oracle_text") or "",
        power=raw.get("power"),
        toughness=raw.get("toughness"),
        colors=list(raw.get("colors") or []),
        color_identity=list(raw.get("color_identity") or []),
        keywords=list(raw.get("keywords") or []),
        legalities=dict(raw.get("legalities") or {}),
        rarity=raw.get("rarity") or "",
        set_name=raw.get("set_name") or "",
        set_code=raw.get("set") or "",
        scryfall_uri=raw.get("scryfall_uri") or "",
        edhrec_rank=raw.get("edhrec_rank"),
    )


def trim_ruling_response(raw: dict[str, Any]) -> ScryfallRuling:
    """Trim a raw Scryfall ruling object."""
    return ScryfallRuling(
        source=raw.get("source") or "",
        published_at=raw.get("published_at") or "",
        comment=raw.get("comment") or "",
    )


def parse_search_response(body: dict[str, Any]) -> ScryfallSearchResult:
    """Parse a Scryfall list object returned by /cards/search."""
    return ScryfallSearchResult(
        cards=[trim_card_response(card) for card in body.get("data") or []],
        has_more=bool(body.get("has_more", False)),
        total_cards=int(body.get("total_cards") or 0),
    )
