"""
MCP server assembly.

create_mcp_server registers every tool on a FastMCP server. Tools borrow
a fresh session from the shared session factory for each call and close
it when the call returns; the server never owns the database.
"""

from typing import Annotated, Literal

from fastmcp import FastMCP
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from manabox_mcp.config import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT, settings
from manabox_mcp.mcp.tools import (
    get_deck_cards_tool,
    list_decks_tool,
    scryfall_card_by_id_tool,
    scryfall_card_tool,
    scryfall_rulings_tool,
    scryfall_search_tool,
    search_cards_tool,
)
from manabox_mcp.services.scryfall_client import ScryfallClient

SEARCH_CARDS_DESCRIPTION = (
    "Search for a Magic: The Gathering card by name in the collection. "
    "Uses fuzzy matching to find the closest card names. "
    "Each result includes the binder or deck the card is in (binderName, binderType), "
    "so this tool can answer questions like 'which decks contain card X?' in a single call. "
    "Use the binder_type filter to restrict results to only decks or only binder cards."
)

LIST_DECKS_DESCRIPTION = "List all Commander (EDH) decks in the collection with their card counts."

GET_DECK_CARDS_DESCRIPTION = (
    "Get all cards in a specific Commander (EDH) deck. "
    "Uses fuzzy matching on the deck name, so you don't need an exact match."
)


def create_mcp_server(
    session_factory: async_sessionmaker[AsyncSession],
    scryfall: ScryfallClient,
) -> FastMCP:
    """
    Build the MCP server with all tools registered.

    Args:
        session_factory: Shared factory the collection tools open sessions from
        scryfall: Shared Scryfall client used by the Scryfall tools

    Returns:
        A FastMCP server ready for the stdio or HTTP transport
    """
    server = FastMCP(settings.app_name)

    # --- Collection tools ---

    @server.tool(name="search_cards", description=SEARCH_CARDS_DESCRIPTION)
    async def search_cards(
        query: Annotated[str, Field(description="Card name or partial name to search for")],
        limit: Annotated[
            int,
            Field(
                ge=1,
                le=MAX_SEARCH_LIMIT,
                description="Maximum number of distinct card names to return",
            ),
        ] = DEFAULT_SEARCH_LIMIT,
        binder_type: Annotated[
            Literal["binder", "deck"] | None,
            Field(
                description="Filter results by location type. "
                "Use 'deck' to find which Commander decks contain a card. "
                "Use 'binder' to find cards in the sorted collection. "
                "Omit to search everywhere."
            ),
        ] = None,
    ) -> str:
        async with session_factory() as session:
            return await search_cards_tool(session, query, limit, binder_type)

    @server.tool(name="list_decks", description=LIST_DECKS_DESCRIPTION)
    async def list_decks() -> str:
        async with session_factory() as session:
            return await list_decks_tool(session)

    @server.tool(name="get_deck_cards", description=GET_DECK_CARDS_DESCRIPTION)
    async def get_deck_cards(
        name: Annotated[str, Field(description="Deck name to look up (fuzzy matched)")],
    ) -> str:
        async with session_factory() as session:
            return await get_deck_cards_tool(session, name)

    # --- Scryfall tools ---

    @server.tool(name="scryfall_search")
    async def scryfall_search(
        query: Annotated[
            str, Field(description="Scryfall search syntax, e.g. 't:dragon c:r cmc<=4'")
        ],
        order: Annotated[
            str | None, Field(description="Sort field: name, cmc, edhrec, usd, released, ...")
        ] = None,
        direction: Annotated[
            Literal["auto", "asc", "desc"] | None, Field(description="Sort direction")
        ] = None,
        page: Annotated[int | None, Field(ge=1, description="Result page, 175 cards each")] = None,
    ) -> str:
        """Search all Magic cards on Scryfall, not just the ones in the collection."""
        return await scryfall_search_tool(scryfall, query, order, direction, page)

    @server.tool(name="scryfall_card")
    async def scryfall_card(
        name: Annotated[str, Field(description="Card name")],
        fuzzy: Annotated[
            bool, Field(description="Allow misspelled or partial names (default true)")
        ] = True,
    ) -> str:
        """Look up a card's oracle text, type, mana cost and legalities on Scryfall."""
        return await scryfall_card_tool(scryfall, name, fuzzy)

    @server.tool(name="scryfall_card_by_id")
    async def scryfall_card_by_id(
        scryfall_id: Annotated[
            str, Field(description="Scryfall UUID, e.g. the scryfallId of a search_cards result")
        ],
    ) -> str:
        """Look up one exact printing on Scryfall by its ID."""
        return await scryfall_card_by_id_tool(scryfall, scryfall_id)

    @server.tool(name="scryfall_rulings")
    async def scryfall_rulings(
        scryfall_id: Annotated[str, Field(description="Scryfall UUID of the card")],
    ) -> str:
        """Get the official rulings for a card from Scryfall."""
        return await scryfall_rulings_tool(scryfall, scryfall_id)

    return server
