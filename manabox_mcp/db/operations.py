"""
Database operations over the card catalog.

The catalog is written in exactly one way: replace_all_cards swaps the
whole table inside the caller's transaction. Everything else is a read.
"""

from collections.abc import Iterable, Sequence

from sqlalchemy import case, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from manabox_mcp.models.card import BinderType, CardRecord, CardSummary, DeckSummary
from manabox_mcp.models.db import CardDB

# --- Import ---


async def replace_all_cards(session: AsyncSession, cards: Iterable[CardRecord]) -> int:
    """
    Replace the whole catalog with new card records.

    Deletes every existing row and inserts the given records. Nothing is
    committed here; the caller commits once so readers observe either the
    old catalog or the new one.

    Returns:
        Number of rows inserted.
    """
    await session.execute(delete(CardDB))

    rows = [_record_to_row(card) for card in cards]
    session.add_all(rows)

    await session.flush()
    return len(rows)


def _record_to_row(card: CardRecord) -> CardDB:
    return CardDB(
        binder_name=card.binder_name,
        binder_type=card.binder_type.value,
        name=card.name,
        set_code=card.set_code,
        set_name=card.set_name,
        collector_number=card.collector_number,
        foil=card.foil,
        rarity=card.rarity,
        quantity=card.quantity,
        manabox_id=card.manabox_id,
        scryfall_id=card.scryfall_id,
        purchase_price=card.purchase_price,
        misprint=card.misprint,
        altered=card.altered,
        condition=card.condition,
        language=card.language,
        purchase_price_currency=card.purchase_price_currency,
    )


# --- Name lookups ---


async def get_distinct_card_names(
    session: AsyncSession,
    binder_type: BinderType | None = None,
    contains: str | None = None,
) -> list[str]:
    """
    Get distinct card names.

    Args:
        session: Database session
        binder_type: Only names present in binders of this type
        contains: Only names containing this fragment. LIKE wildcards in
            the fragment are escaped; case sensitivity follows the
            database collation (case-insensitive for ASCII on SQLite).

    Returns:
        Names ordered alphabetically, so callers ranking them get a
        deterministic order among ties.
    """
    stmt = select(CardDB.name).distinct()
    if binder_type is not None:
        stmt = stmt.where(CardDB.binder_type == binder_type.value)
    if contains is not None:
        stmt = stmt.where(CardDB.name.contains(contains, autoescape=True))

    result = await session.execute(stmt.order_by(CardDB.name))
    return list(result.scalars().all())


async def get_distinct_binder_names(session: AsyncSession, binder_type: BinderType) -> list[str]:
    """Get distinct binder names of one binder type, alphabetically."""
    result = await session.execute(
        select(CardDB.binder_name)
        .distinct()
        .where(CardDB.binder_type == binder_type.value)
        .order_by(CardDB.binder_name)
    )
    return list(result.scalars().all())


async def get_cards_by_names(
    session: AsyncSession,
    names: Sequence[str],
    binder_type: BinderType | None = None,
) -> list[CardDB]:
    """
    Fetch every row for the given card names.

    Rows come back grouped by name in the order of `names`, so a ranked
    name list keeps its ranking (best match's printings first). Printings
    of the same name are ordered by set name.
    """
    if not names:
        return []

    rank = case({name: position for position, name in enumerate(names)}, value=CardDB.name)

    stmt = select(CardDB).where(CardDB.name.in_(names))
    if binder_type is not None:
        stmt = stmt.where(CardDB.binder_type == binder_type.value)

    result = await session.execute(stmt.order_by(rank, CardDB.set_name, CardDB.id))
    return list(result.scalars().all())


# --- Deck aggregates ---


async def get_deck_card_counts(session: AsyncSession) -> list[DeckSummary]:
    """
    Get every Commander deck with its total card count.

    Counts are summed quantities, not row counts. Decks are ordered by name.
    """
    result = await session.execute(
        select(CardDB.binder_name, func.sum(CardDB.quantity))
        .where(CardDB.binder_type == BinderType.DECK.value)
        .group_by(CardDB.binder_name)
        .order_by(CardDB.binder_name)
    )
    return [DeckSummary(name=name, card_count=int(total or 0)) for name, total in result.all()]


async def get_deck_contents(session: AsyncSession, deck_name: str) -> list[CardDB]:
    """Get all rows of the deck with exactly this name, ordered by card name."""
    result = await session.execute(
        select(CardDB)
        .where(
            CardDB.binder_type == BinderType.DECK.value,
            CardDB.binder_name == deck_name,
        )
        .order_by(CardDB.name, CardDB.id)
    )
    return list(result.scalars().all())


async def count_cards(session: AsyncSession) -> int:
    """Number of rows in the catalog."""
    result = await session.execute(select(func.count()).select_from(CardDB))
    return int(result.scalar_one())


# --- Conversion ---


def card_to_model(card: CardDB) -> CardRecord:
    """Convert a database row to a domain record."""
    return CardRecord(
        binder_name=card.binder_name,
        binder_type=BinderType(card.binder_type),
        name=card.name,
        set_code=card.set_code,
        set_name=card.set_name,
        collector_number=card.collector_number,
        foil=card.foil,
        rarity=card.rarity,
        quantity=card.quantity,
        manabox_id=card.manabox_id,
        scryfall_id=card.scryfall_id,
        purchase_price=card.purchase_price,
        misprint=card.misprint,
        altered=card.altered,
        condition=card.condition,
        language=card.language,
        purchase_price_currency=card.purchase_price_currency,
    )


def card_to_summary(card: CardDB) -> CardSummary:
    """Project a database row onto the lean summary returned by lookups."""
    return CardSummary(
        binder_type=BinderType(card.binder_type),
        binder_name=card.binder_name,
        quantity=card.quantity,
        name=card.name,
        scryfall_id=card.scryfall_id,
    )
