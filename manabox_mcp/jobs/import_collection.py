"""
Import a ManaBox CSV export into the card catalog.

Replaces the whole catalog in one transaction. Run standalone with:

    python -m manabox_mcp.jobs.import_collection export.csv
"""

import argparse
import asyncio
import logging
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from manabox_mcp.config import LOG_FORMAT, settings
from manabox_mcp.db.database import get_session_factory, init_db
from manabox_mcp.db.operations import replace_all_cards
from manabox_mcp.parsers.collection_import import parse_collection_csv

logger = logging.getLogger(__name__)


async def import_collection_file(
    csv_path: Path,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> int:
    """
    Parse a ManaBox export and replace the catalog with its cards.

    Args:
        csv_path: Path to the CSV export
        session_factory: Session factory to write through. Defaults to the
            shared one.

    Returns:
        Number of card rows imported.

    Raises:
        FileNotFoundError: If the CSV file doesn't exist
    """
    if not csv_path.is_file():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    cards = parse_collection_csv(csv_path.read_text(encoding="utf-8-sig"))
    logger.info("Parsed %d cards from %s", len(cards), csv_path)

    factory = session_factory or get_session_factory()
    async with factory() as session, session.begin():
        imported = await replace_all_cards(session, cards)

    logger.info("Imported %d cards into the catalog", imported)
    return imported


async def run_import(csv_path: Path) -> None:
    """Create tables if needed, then import."""
    await init_db()

    try:
        await import_collection_file(csv_path)
    except Exception as e:
        logger.error("Failed to import collection: %s", e)
        raise


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Import a ManaBox CSV export")
    parser.add_argument("csv_path", type=Path, help="Path to the ManaBox CSV export")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    asyncio.run(run_import(args.csv_path))


if __name__ == "__main__":
    main()
