"""
manabox-mcp services.

Collection lookups over the card catalog and the Scryfall client.
"""

from manabox_mcp.services.collection_search import (
    format_deck_contents,
    format_deck_list,
    format_search_results,
    get_deck_cards,
    list_decks,
    search_cards_by_name,
)
from manabox_mcp.services.scryfall_client import RateLimiter, ScryfallClient, ScryfallError

__all__ = [
    "RateLimiter",
    "ScryfallClient",
    "ScryfallError",
    "format_deck_contents",
    "format_deck_list",
    "format_search_results",
    "get_deck_cards",
    "list_decks",
    "search_cards_by_name",
]
