from manabox_mcp.models.card import (
    BinderType,
    CardRecord,
    CardSummary,
    DeckContents,
    DeckSummary,
)
from manabox_mcp.models.failure import FailureKind, KnownError

__all__ = [
    "BinderType",
    "CardRecord",
    "CardSummary",
    "DeckContents",
    "DeckSummary",
    "FailureKind",
    "KnownError",
]
