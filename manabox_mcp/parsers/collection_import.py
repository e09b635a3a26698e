"""
Parser for ManaBox collection CSV exports.

ManaBox writes one row per owned printing with a fixed 17-column header:

    Binder Name,Binder Type,Name,Set code,Set name,Collector number,Foil,
    Rarity,Quantity,ManaBox ID,Scryfall ID,Purchase price,Misprint,Altered,
    Condition,Language,Purchase price currency

Card names containing commas are double-quoted ("Ezuri, Renegade Leader")
and literal quotes are doubled. Malformed rows are logged and skipped;
one bad row never aborts an import.
"""

import csv
import logging
from decimal import Decimal, InvalidOperation

from manabox_mcp.models.card import BinderType, CardRecord

logger = logging.getLogger(__name__)

EXPECTED_COLUMNS = 17


def parse_binder_type(value: str) -> BinderType | None:
    """Map the export's binder type column to BinderType, None if unknown."""
    try:
        return BinderType(value.strip().lower())
    except ValueError:
        return None


def _parse_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


def _parse_price(value: str) -> Decimal:
    try:
        price = Decimal(value.strip())
    except InvalidOperation:
        return Decimal("0")
    return price if price.is_finite() else Decimal("0")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() == "true"


def parse_collection_csv(text: str) -> list[CardRecord]:
    """
    Parse a ManaBox CSV export.

    The first non-blank line is the header and is skipped.

    Returns:
        One CardRecord per valid data row, in file order.
    """
    # Normalize CRLF (Windows) and bare CR (classic Mac) line endings
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [line for line in normalized.split("\n") if line.strip()]

    if len(lines) < 2:
        logger.warning("CSV has no data rows")
        return []

    cards: list[CardRecord] = []

    for row_number, fields in enumerate(csv.reader(lines[1:]), start=2):
        if len(fields) != EXPECTED_COLUMNS:
            logger.warning(
                "Row %d: expected %d columns, got %d -- skipping",
                row_number,
                EXPECTED_COLUMNS,
                len(fields),
            )
            continue

        binder_type = parse_binder_type(fields[1])
        if binder_type is None:
            logger.warning("Row %d: unknown binder type %r -- skipping", row_number, fields[1])
            continue

        name = fields[2]
        if not name.strip():
            logger.warning("Row %d: missing card name -- skipping", row_number)
            continue

        quantity = _parse_int(fields[8])
        if quantity < 0:
            logger.warning("Row %d: negative quantity %d -- skipping", row_number, quantity)
            continue

        cards.append(
            CardRecord(
                binder_name=fields[0],
                binder_type=binder_type,
                name=name,
                set_code=fields[3],
                set_name=fields[4],
                collector_number=fields[5],
                foil=fields[6],
                rarity=fields[7],
                quantity=quantity,
                manabox_id=_parse_int(fields[9]),
                scryfall_id=fields[10],
                purchase_price=_parse_price(fields[11]),
                misprint=_parse_bool(fields[12]),
                altered=_parse_bool(fields[13]),
                condition=fields[14],
                language=fields[15],
                purchase_price_currency=fields[16],
            )
        )

    return cards
