import json

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from manabox_mcp.db.operations import replace_all_cards
from manabox_mcp.models.card import BinderType, CardSummary, DeckContents, DeckSummary
from manabox_mcp.models.db import Base
from manabox_mcp.services.collection_search import (
    format_deck_contents,
    format_deck_list,
    format_search_results,
    get_deck_cards,
    list_decks,
    search_cards_by_name,
)


class TestSearchCardsByName:
    async def test_finds_exact_name_in_every_binder(self, seeded_session: AsyncSession) -> None:
        """Sol Ring appears in two locations (Boxed binder and Zurgo deck)."""
        results = await search_cards_by_name(seeded_session, "Sol Ring")

        assert len(results) == 2
        assert all(card.name == "Sol Ring" for card in results)
        assert {card.binder_type for card in results} == {BinderType.BINDER, BinderType.DECK}

    async def test_finds_substring_matches(self, seeded_session: AsyncSession) -> None:
        results = await search_cards_by_name(seeded_session, "Lightning")

        assert [card.name for card in results] == ["Lightning Bolt", "Lightning Greaves"]

    async def test_substring_match_is_case_insensitive(self, seeded_session: AsyncSession) -> None:
        results = await search_cards_by_name(seeded_session, "lightning bolt")

        assert [card.name for card in results] == ["Lightning Bolt"]

    async def test_substring_hits_are_ranked_by_distance(
        self, session: AsyncSession, make_card
    ) -> None:
        """The closest substring hit comes first, not the alphabetically first."""
        await replace_all_cards(
            session,
            [
                make_card(name="Elvish Archdruid"),
                make_card(name="Elvish Mystic"),
                make_card(name="Elvish"),
            ],
        )
        await session.commit()

        results = await search_cards_by_name(session, "Elvish")

        assert [card.name for card in results] == ["Elvish", "Elvish Mystic", "Elvish Archdruid"]

    async def test_substring_hits_suppress_typo_fallback(
        self, session: AsyncSession, make_card
    ) -> None:
        """A name closer by edit distance is not added when substring hits exist."""
        await replace_all_cards(
            session,
            [make_card(name="Opt"), make_card(name="Optimus Prime, Hero")],
        )
        await session.commit()

        results = await search_cards_by_name(session, "Optim")

        assert [card.name for card in results] == ["Optimus Prime, Hero"]

    async def test_limit_counts_distinct_names(self, seeded_session: AsyncSession) -> None:
        results = await search_cards_by_name(seeded_session, "Lightning", limit=1)

        assert {card.name for card in results} == {"Lightning Bolt"}

    async def test_one_name_can_expand_past_limit(self, seeded_session: AsyncSession) -> None:
        """limit bounds names; every printing of the name is returned."""
        results = await search_cards_by_name(seeded_session, "Sol Ring", limit=1)

        assert len(results) == 2

    async def test_printings_ordered_by_set_name(self, seeded_session: AsyncSession) -> None:
        results = await search_cards_by_name(seeded_session, "Sol Ring", limit=1)

        assert [card.binder_name for card in results] == ["Zurgo", "Boxed"]

    async def test_falls_back_to_edit_distance(self, seeded_session: AsyncSession) -> None:
        """'Sol Rign' matches no substring but is one transposition from Sol Ring."""
        results = await search_cards_by_name(seeded_session, "Sol Rign")

        assert results
        assert results[0].name == "Sol Ring"

    async def test_handles_misspelled_card_names(self, session: AsyncSession, make_card) -> None:
        await replace_all_cards(session, [make_card(name="Swords to Plowshares")])
        await session.commit()

        results = await search_cards_by_name(session, "Sords to Plowshares")

        assert results
        assert results[0].name == "Swords to Plowshares"

    async def test_typo_fallback_respects_limit(self, seeded_session: AsyncSession) -> None:
        results = await search_cards_by_name(seeded_session, "Sords to Plowshares", limit=1)

        assert [card.name for card in results] == ["Swords to Plowshares"]

    async def test_empty_catalog_returns_empty(self, session: AsyncSession) -> None:
        assert await search_cards_by_name(session, "anything") == []
        assert await search_cards_by_name(session, "anything", binder_type=BinderType.DECK) == []

    async def test_non_positive_limit_returns_empty(self, seeded_session: AsyncSession) -> None:
        assert await search_cards_by_name(seeded_session, "Sol Ring", limit=0) == []
        assert await search_cards_by_name(seeded_session, "Sol Ring", limit=-3) == []


class TestSearchWithBinderType:
    async def test_filters_to_decks(self, seeded_session: AsyncSession) -> None:
        results = await search_cards_by_name(seeded_session, "Sol Ring", binder_type=BinderType.DECK)

        assert results == [
            CardSummary(
                binder_type=BinderType.DECK,
                binder_name="Zurgo",
                quantity=1,
                name="Sol Ring",
                scryfall_id="aaaa-bbbb-cccc",
            )
        ]

    async def test_filters_to_binders(self, seeded_session: AsyncSession) -> None:
        results = await search_cards_by_name(
            seeded_session, "Lightning", binder_type=BinderType.BINDER
        )

        assert [card.name for card in results] == ["Lightning Bolt"]

    async def test_card_outside_requested_binder_type_returns_empty(
        self, session: AsyncSession, make_card
    ) -> None:
        """Counterspell is only in a binder: a deck search must not suggest other cards."""
        await replace_all_cards(
            session,
            [
                make_card(name="Counterspell", binder_name="Trade Binder"),
                make_card(name="Counterflux", binder_name="Zurgo", binder_type=BinderType.DECK),
            ],
        )
        await session.commit()

        results = await search_cards_by_name(
            session, "Counterspell", binder_type=BinderType.DECK
        )

        assert results == []

    async def test_only_card_in_catalog_outside_binder_type(
        self, session: AsyncSession, make_card
    ) -> None:
        await replace_all_cards(session, [make_card(name="Counterspell")])
        await session.commit()

        assert await search_cards_by_name(session, "Counterspell", binder_type=BinderType.DECK) == []

    async def test_typo_fallback_stays_within_binder_type(
        self, seeded_session: AsyncSession
    ) -> None:
        """A misspelling that matches nothing anywhere is corrected within the filter."""
        results = await search_cards_by_name(
            seeded_session, "Sol Rign", binder_type=BinderType.DECK
        )

        assert results
        assert results[0].name == "Sol Ring"
        assert all(card.binder_type == BinderType.DECK for card in results)


class TestListDecks:
    async def test_returns_decks_alphabetically_with_counts(
        self, session: AsyncSession, make_card
    ) -> None:
        deck = BinderType.DECK
        await replace_all_cards(
            session,
            [
                make_card(name="Zurgo Stormrender", binder_name="Zurgo", binder_type=deck),
                make_card(name="Sol Ring", binder_name="Zurgo", binder_type=deck),
                make_card(name="Lightning Greaves", binder_name="Zurgo", binder_type=deck),
                make_card(name="Dragon Broodmother", binder_name="Karrthus BRG", binder_type=deck),
                make_card(name="Karrthus, Tyrant of Jund", binder_name="Karrthus BRG", binder_type=deck),
            ],
        )
        await session.commit()

        assert await list_decks(session) == [
            DeckSummary(name="Karrthus BRG", card_count=2),
            DeckSummary(name="Zurgo", card_count=3),
        ]

    async def test_excludes_binders(self, seeded_session: AsyncSession) -> None:
        names = [deck.name for deck in await list_decks(seeded_session)]

        assert "Boxed" not in names
        assert "Trade Binder" not in names

    async def test_empty_catalog_returns_empty(self, session: AsyncSession) -> None:
        assert await list_decks(session) == []


class TestGetDeckCards:
    async def test_exact_deck_name(self, seeded_session: AsyncSession) -> None:
        result = await get_deck_cards(seeded_session, "Zurgo")

        assert result is not None
        assert result.resolved_name == "Zurgo"
        assert len(result.cards) == 3
        assert all(card.binder_name == "Zurgo" for card in result.cards)

    async def test_fuzzy_matches_misspelled_deck_name(self, seeded_session: AsyncSession) -> None:
        result = await get_deck_cards(seeded_session, "Zurgi")

        assert result is not None
        assert result.resolved_name == "Zurgo"
        assert [card.name for card in result.cards] == [
            "Lightning Greaves",
            "Sol Ring",
            "Zurgo Stormrender",
        ]

    async def test_fuzzy_matches_partial_deck_name(self, seeded_session: AsyncSession) -> None:
        result = await get_deck_cards(seeded_session, "Karrthus")

        assert result is not None
        assert result.resolved_name == "Karrthus BRG"

    async def test_only_returns_cards_from_matched_deck(self, seeded_session: AsyncSession) -> None:
        result = await get_deck_cards(seeded_session, "Orvar B")

        assert result is not None
        assert [card.name for card in result.cards] == ["Orvar, the All-Form"]

    async def test_no_decks_returns_none(self, session: AsyncSession, make_card) -> None:
        await replace_all_cards(session, [make_card()])
        await session.commit()

        assert await get_deck_cards(session, "anything") is None

    async def test_empty_catalog_returns_none(self, session: AsyncSession) -> None:
        assert await get_deck_cards(session, "anything") is None


class TestStorageFailure:
    """Storage errors reach the caller instead of reading as "no match"."""

    @pytest.fixture
    async def broken_session(self, async_engine, seeded_session: AsyncSession) -> AsyncSession:
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        return seeded_session

    async def test_search_raises(self, broken_session: AsyncSession) -> None:
        with pytest.raises(SQLAlchemyError):
            await search_cards_by_name(broken_session, "Sol Ring")

    async def test_search_with_binder_type_raises(self, broken_session: AsyncSession) -> None:
        with pytest.raises(SQLAlchemyError):
            await search_cards_by_name(broken_session, "Sol Rign", binder_type=BinderType.DECK)

    async def test_list_decks_raises(self, broken_session: AsyncSession) -> None:
        with pytest.raises(SQLAlchemyError):
            await list_decks(broken_session)

    async def test_get_deck_cards_raises(self, broken_session: AsyncSession) -> None:
        with pytest.raises(SQLAlchemyError):
            await get_deck_cards(broken_session, "Zurgo")


class TestFormatting:
    def test_no_search_results_message(self) -> None:
        assert format_search_results("Black Lotus", []) == 'No cards found matching "Black Lotus".'

    def test_search_results_as_json(self) -> None:
        card = CardSummary(
            binder_type=BinderType.DECK,
            binder_name="Zurgo",
            quantity=2,
            name="Sol Ring",
            scryfall_id="abc",
        )

        payload = json.loads(format_search_results("Sol Ring", [card]))

        assert payload == [
            {
                "binderType": "deck",
                "binderName": "Zurgo",
                "quantity": 2,
                "name": "Sol Ring",
                "scryfallId": "abc",
            }
        ]

    def test_no_decks_message(self) -> None:
        assert format_deck_list([]) == "No decks found in the collection."

    def test_deck_list_as_json(self) -> None:
        payload = json.loads(format_deck_list([DeckSummary(name="Zurgo", card_count=3)]))

        assert payload == [{"name": "Zurgo", "cardCount": 3}]

    def test_deck_not_found_message(self) -> None:
        text = format_deck_contents("Atraxa", None)

        assert text == 'No deck found matching "Atraxa". Use list_decks to see available decks.'

    def test_deck_header_exact_match(self) -> None:
        text = format_deck_contents("Zurgo", DeckContents(resolved_name="Zurgo"))

        assert text.startswith('Deck: "Zurgo"\n\n')
        assert "matched from" not in text

    def test_deck_header_notes_corrected_name(self) -> None:
        text = format_deck_contents("Zurgi", DeckContents(resolved_name="Zurgo"))

        header, body = text.split("\n\n", 1)
        assert header == 'Deck: "Zurgo" (matched from "Zurgi")'
        assert json.loads(body) == []
