"""
Collection search service.

Answers the three questions an assistant asks about a ManaBox collection:

- "Do I own Sol Ring, and where is it?" -> search_cards_by_name
- "What decks do I have?" -> list_decks
- "What's in my Zurgo deck?" -> get_deck_cards

Every call re-reads the catalog through the given session. Nothing is
cached between calls.
"""

import json
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from manabox_mcp.analysis.fuzzy import DEFAULT_MAX_RESULTS, find_closest_matches
from manabox_mcp.db.operations import (
    card_to_summary,
    get_cards_by_names,
    get_deck_card_counts,
    get_deck_contents,
    get_distinct_binder_names,
    get_distinct_card_names,
)
from manabox_mcp.models.card import BinderType, CardSummary, DeckContents, DeckSummary

logger = logging.getLogger(__name__)


async def search_cards_by_name(
    session: AsyncSession,
    query: str,
    limit: int = DEFAULT_MAX_RESULTS,
    binder_type: BinderType | None = None,
) -> list[CardSummary]:
    """
    Search the collection for cards by (possibly misspelled) name.

    Phase 1: substring match on distinct names (fast, index-assisted).
    Phase 2: rank the substring hits by edit distance.
    Fallback: with zero substring hits, rank every distinct name instead.
    The fallback is skipped when the query matches a name that exists only
    outside the requested binder type.

    Args:
        session: Database session
        query: Card name or partial name
        limit: Maximum number of distinct card names. A name owned in
            several printings or binders expands to several summaries,
            so the result can be longer than `limit`.
        binder_type: Restrict to binders or to decks

    Returns:
        Summaries grouped by name in best-match-first order, printings of
        one name ordered by set name. Empty when nothing matches.
    """
    if limit <= 0:
        return []

    substring_names = await get_distinct_card_names(session, binder_type, contains=query)

    if substring_names:
        matched_names = find_closest_matches(query, substring_names, limit)
    else:
        if binder_type is not None and await get_distinct_card_names(session, contains=query):
            logger.debug("'%s' exists outside %s binders, not suggesting", query, binder_type.value)
            return []

        all_names = await get_distinct_card_names(session, binder_type)
        matched_names = find_closest_matches(query, all_names, limit)

    if not matched_names:
        return []

    rows = await get_cards_by_names(session, matched_names, binder_type)
    return [card_to_summary(row) for row in rows]


async def list_decks(session: AsyncSession) -> list[DeckSummary]:
    """List every Commander deck with its card count, alphabetically."""
    return await get_deck_card_counts(session)


async def get_deck_cards(session: AsyncSession, deck_name: str) -> DeckContents | None:
    """
    Get all cards in a deck, fuzzy-matching the deck name.

    Deck names are few, so the single closest name is picked by a full
    edit-distance scan with no substring stage.

    Returns:
        The resolved deck name and its cards sorted by name, or None when
        the collection has no decks.
    """
    deck_names = await get_distinct_binder_names(session, BinderType.DECK)
    if not deck_names:
        return None

    matches = find_closest_matches(deck_name, deck_names, 1)
    if not matches:
        return None

    resolved_name = matches[0]
    if resolved_name != deck_name:
        logger.debug("Deck '%s' resolved to '%s'", deck_name, resolved_name)

    rows = await get_deck_contents(session, resolved_name)
    return DeckContents(
        resolved_name=resolved_name,
        cards=[card_to_summary(row) for row in rows],
    )


def format_search_results(query: str, results: list[CardSummary]) -> str:
    """Render card search results for an LLM client."""
    if not results:
        return f'No cards found matching "{query}".'
    return _to_json([card.to_dict() for card in results])


def format_deck_list(decks: list[DeckSummary]) -> str:
    """Render the deck list for an LLM client."""
    if not decks:
        return "No decks found in the collection."
    return _to_json([deck.to_dict() for deck in decks])


def format_deck_contents(deck_name: str, contents: DeckContents | None) -> str:
    """
    Render a deck lookup for an LLM client.

    The header says when the deck name was corrected so the assistant can
    tell the user which deck it actually read.
    """
    if contents is None:
        return f'No deck found matching "{deck_name}". Use list_decks to see available decks.'

    if contents.resolved_name != deck_name:
        header = f'Deck: "{contents.resolved_name}" (matched from "{deck_name}")\n\n'
    else:
        header = f'Deck: "{contents.resolved_name}"\n\n'

    return header + _to_json([card.to_dict() for card in contents.cards])


def _to_json(payload: list[dict[str, object]]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)
