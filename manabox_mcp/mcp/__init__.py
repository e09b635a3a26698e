"""MCP tools exposing the card collection to an LLM client."""

from manabox_mcp.mcp.server import create_mcp_server
from manabox_mcp.mcp.tools import (
    get_deck_cards_tool,
    list_decks_tool,
    scryfall_card_by_id_tool,
    scryfall_card_tool,
    scryfall_rulings_tool,
    scryfall_search_tool,
    search_cards_tool,
)

__all__ = [
    "create_mcp_server",
    "get_deck_cards_tool",
    "list_decks_tool",
    "scryfall_card_by_id_tool",
    "scryfall_card_tool",
    "scryfall_rulings_tool",
    "scryfall_search_tool",
    "search_cards_tool",
]
