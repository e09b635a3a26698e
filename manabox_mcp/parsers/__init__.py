from manabox_mcp.parsers.collection_import import parse_binder_type, parse_collection_csv
from manabox_mcp.parsers.scryfall import (
    ScryfallCard,
    ScryfallRuling,
    ScryfallSearchResult,
    trim_card_response,
    trim_ruling_response,
)

__all__ = [
    "ScryfallCard",
    "ScryfallRuling",
    "ScryfallSearchResult",
    "parse_binder_type",
    "parse_collection_csv",
    "trim_card_response",
    "trim_ruling_response",
]
