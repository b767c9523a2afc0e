"""Command line entry for coursedocs."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional, Sequence

import uvicorn

from coursedocs.core.database import database_manager
from coursedocs.core.observability import configure_logging

logger = logging.getLogger(__name__)


def run_server(host: str, port: int) -> None:
    uvicorn.run("coursedocs.api.main:app", host=host, port=port)


async def setup_indexes() -> None:
    await database_manager.initialize()
    try:
        await database_manager.ensure_indexes()
    finally:
        await database_manager.close()


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="coursedocs", description="Course and interview document backend")
    subcommands = parser.add_subparsers(dest="command")

    serve = subcommands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8080)

    subcommands.add_parser("setup-indexes", help="Create the MongoDB unique and lookup indexes")

    args = parser.parse_args(argv)
    configure_logging()

    if args.command == "setup-indexes":
        asyncio.run(setup_indexes())
        logger.info("MongoDB indexes are in place")
        return
    run_server(getattr(args, "host", "0.0.0.0"), getattr(args, "port", 8080))


if __name__ == "__main__":
    main()
