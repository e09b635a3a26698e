from manabox_mcp.db.database import get_session, get_session_factory, init_db
from manabox_mcp.db.operations import (
    card_to_model,
    card_to_summary,
    count_cards,
    get_cards_by_names,
    get_deck_card_counts,
    get_deck_contents,
    get_distinct_binder_names,
    get_distinct_card_names,
    replace_all_cards,
)

__all__ = [
    "card_to_model",
    "card_to_summary",
    "count_cards",
    "get_cards_by_names",
    "get_deck_card_counts",
    "get_deck_contents",
    "get_distinct_binder_names",
    "get_distinct_card_names",
    "get_session",
    "get_session_factory",
    "init_db",
    "replace_all_cards",
]
