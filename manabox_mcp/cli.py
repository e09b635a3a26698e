"""
Command line entry point.

Loads a ManaBox CSV export into the catalog, then serves the MCP tools
over stdio, streamable HTTP, or both at once:

    manabox-mcp -d export.csv [-b manabox.db] [--in-memory] [--port 3000]

stdout carries the stdio JSON-RPC stream, so every log line goes to stderr.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import uvicorn

from manabox_mcp.config import LOG_FORMAT, settings
from manabox_mcp.db import database
from manabox_mcp.jobs.import_collection import import_collection_file
from manabox_mcp.main import MCP_PATH, create_app
from manabox_mcp.mcp.server import create_mcp_server
from manabox_mcp.services.scryfall_client import ScryfallClient

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "manabox.db"
IN_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid port: {value}") from None
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"Invalid port: {value}")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="manabox-mcp",
        description="Serve a ManaBox collection export to MCP clients",
    )
    parser.add_argument(
        "-d",
        "--data",
        type=Path,
        default=Path(settings.data_path) if settings.data_path else None,
        help="ManaBox CSV export to load",
    )
    parser.add_argument(
        "-b",
        "--db",
        default=DEFAULT_DB_PATH,
        help=f"SQLite database file (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--in-memory",
        action="store_true",
        help="Keep the catalog in memory instead of a database file",
    )
    parser.add_argument(
        "--port",
        type=_port,
        default=settings.port,
        help=f"HTTP port (default: $PORT or {settings.port})",
    )
    parser.add_argument(
        "--transport",
        choices=("stdio", "http", "both"),
        default="both",
        help="Which MCP transport(s) to serve (default: both)",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse and validate command line arguments."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.data is None:
        parser.error("the following arguments are required: -d/--data")
    if not args.data.is_file():
        parser.error(f"CSV file not found: {args.data}")

    return args


def database_url_for(args: argparse.Namespace) -> str:
    """SQLite URL for the chosen storage mode."""
    if args.in_memory:
        return IN_MEMORY_URL
    return f"sqlite+aiosqlite:///{args.db}"


async def serve(args: argparse.Namespace) -> None:
    """Import the collection and run the selected transports until they exit."""
    database.configure_database(database_url_for(args))
    await database.init_db()

    await import_collection_file(args.data, database.get_session_factory())
    logger.info("Catalog loaded into %s", "memory" if args.in_memory else args.db)

    async with ScryfallClient() as scryfall:
        mcp_server = create_mcp_server(database.get_session_factory(), scryfall)

        runners = []
        if args.transport in ("http", "both"):
            app = create_app(mcp_server)
            config = uvicorn.Config(
                app,
                host=settings.host,
                port=args.port,
                log_level=settings.log_level.lower(),
            )
            logger.info("HTTP transport listening on port %d at %s", args.port, MCP_PATH)
            runners.append(uvicorn.Server(config).serve())
        if args.transport in ("stdio", "both"):
            logger.info("stdio transport connected")
            runners.append(mcp_server.run_async(transport="stdio"))

        await asyncio.gather(*runners)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = parse_args(argv)

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, stream=sys.stderr)

    try:
        asyncio.run(serve(args))
    except KeyboardInterrupt:
        logger.info("Shutting down")


if __name__ == "__main__":
    main()
