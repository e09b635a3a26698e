"""
MCP tool implementations.

Each tool takes its collaborators (a database session or a Scryfall
client) explicitly and returns the text an LLM client will read.
Registration with the MCP server lives in manabox_mcp.mcp.server.
"""

import json
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from manabox_mcp.config import DEFAULT_SEARCH_LIMIT
from manabox_mcp.models.card import BinderType
from manabox_mcp.models.failure import KnownError
from manabox_mcp.services.collection_search import (
    format_deck_contents,
    format_deck_list,
    format_search_results,
    get_deck_cards,
    list_decks,
    search_cards_by_name,
)
from manabox_mcp.services.scryfall_client import ScryfallClient

logger = logging.getLogger(__name__)


# --- Collection tools ---


async def search_cards_tool(
    session: AsyncSession,
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
    binder_type: str | None = None,
) -> str:
    """
    Search the collection by card name.

    Args:
        session: Database session
        query: Card name or partial name
        limit: Maximum number of distinct card names
        binder_type: "binder", "deck", or None for everywhere

    Returns:
        JSON list of card summaries, or a no-match message
    """
    scope = BinderType(binder_type) if binder_type else None
    results = await search_cards_by_name(session, query, limit, scope)
    logger.info("search_cards %r (binder_type=%s): %d results", query, binder_type, len(results))
    return format_search_results(query, results)


async def list_decks_tool(session: AsyncSession) -> str:
    """List all Commander decks with their card counts."""
    decks = await list_decks(session)
    return format_deck_list(decks)


async def get_deck_cards_tool(session: AsyncSession, name: str) -> str:
    """
    Get every card in a deck, fuzzy-matching the deck name.

    Args:
        session: Database session
        name: Deck name as typed by the user

    Returns:
        Header naming the resolved deck followed by its cards as JSON, or
        a not-found message pointing at list_decks
    """
    contents = await get_deck_cards(session, name)
    return format_deck_contents(name, contents)


# --- Scryfall tools ---


async def scryfall_search_tool(
    scryfall: ScryfallClient,
    query: str,
    order: str | None = None,
    direction: str | None = None,
    page: int | None = None,
) -> str:
    """Run a Scryfall full-text search."""
    try:
        result = await scryfall.search_cards(query, order=order, direction=direction, page=page)
    except KnownError as e:
        return format_error(e)
    return _to_json(result.to_dict())


async def scryfall_card_tool(scryfall: ScryfallClient, name: str, fuzzy: bool = True) -> str:
    """Look up canonical card data by name."""
    try:
        card = await scryfall.get_card_by_name(name, fuzzy=fuzzy)
    except KnownError as e:
        return format_error(e)
    return _to_json(card.to_dict())


async def scryfall_card_by_id_tool(scryfall: ScryfallClient, scryfall_id: str) -> str:
    """Look up one printing by Scryfall ID (as found in search_cards results)."""
    try:
        card = await scryfall.get_card_by_id(scryfall_id)
    except KnownError as e:
        return format_error(e)
    return _to_json(card.to_dict())


async def scryfall_rulings_tool(scryfall: ScryfallClient, scryfall_id: str) -> str:
    """Get official rulings for a card."""
    try:
        rulings = await scryfall.get_rulings(scryfall_id)
    except KnownError as e:
        return format_error(e)
    if not rulings:
        return "No rulings found for this card."
    return _to_json([ruling.to_dict() for ruling in rulings])


def format_error(error: KnownError) -> str:
    """Render a known failure as tool text instead of raising."""
    text = f"Error: {error.message}"
    if error.suggestion:
        text += f"\n{error.suggestion}"
    return text


def _to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)
