from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from manabox_mcp.db.operations import replace_all_cards
from manabox_mcp.models.card import BinderType, CardRecord
from manabox_mcp.models.db import Base

BASE_CARD = CardRecord(
    binder_name="Boxed",
    binder_type=BinderType.BINDER,
    name="Sol Ring",
    set_code="C21",
    set_name="Commander 2021",
    collector_number="188",
    foil="normal",
    rarity="uncommon",
    quantity=1,
    manabox_id=58604,
    scryfall_id="aaaa-bbbb-cccc",
    purchase_price=Decimal("2.50"),
    misprint=False,
    altered=False,
    condition="near_mint",
    language="en",
    purchase_price_currency="USD",
)

CardFactory = Callable[..., CardRecord]


def _make_card(**overrides) -> CardRecord:
    return replace(BASE_CARD, **overrides)


@pytest.fixture
def make_card() -> CardFactory:
    """Build a CardRecord with sensible defaults. Override any field as needed."""
    return _make_card


@pytest.fixture
def seed_cards() -> list[CardRecord]:
    """A mix of binder cards and deck cards."""
    deck = BinderType.DECK
    return [
        _make_card(name="Sol Ring", binder_name="Boxed"),
        _make_card(
            name="Sol Ring",
            binder_name="Zurgo",
            binder_type=deck,
            set_code="C20",
            set_name="Commander 2020",
        ),
        _make_card(name="Lightning Bolt", binder_name="Boxed"),
        _make_card(name="Lightning Greaves", binder_name="Zurgo", binder_type=deck),
        _make_card(name="Swords to Plowshares", binder_name="Boxed"),
        _make_card(name="Zurgo Stormrender", binder_name="Zurgo", binder_type=deck, rarity="mythic"),
        _make_card(
            name="Karrthus, Tyrant of Jund",
            binder_name="Karrthus BRG",
            binder_type=deck,
            rarity="mythic",
        ),
        _make_card(name="Dragon Broodmother", binder_name="Karrthus BRG", binder_type=deck),
        _make_card(name="Orvar, the All-Form", binder_name="Orvar B", binder_type=deck),
        _make_card(name="Counterspell", binder_name="Trade Binder"),
    ]


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded_session(session: AsyncSession, seed_cards: list[CardRecord]) -> AsyncSession:
    """Session over a catalog loaded with seed_cards."""
    await replace_all_cards(session, seed_cards)
    await session.commit()
    return session
