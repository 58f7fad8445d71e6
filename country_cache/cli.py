"""
Command line entry point for Country Cache.

Runs a refresh cycle, prints status, creates tables or serves the API without
going through HTTP.
"""

import argparse
import asyncio
import sys

from country_cache.api.models import to_iso_utc
from country_cache.config import Config
from country_cache.database.engine import close_db, get_db_session, init_db
from country_cache.database.repositories import CountryRepository
from country_cache.exceptions import RefreshError
from country_cache.logger import get_logger
from country_cache.services.refresh import RefreshPipeline

logger = get_logger(__name__)


async def run_refresh() -> int:
    await init_db()
    try:
        async with get_db_session() as session:
            repository = CountryRepository(session)
            try:
                result = await RefreshPipeline(repository).run()
            except RefreshError as e:
                logger.error(f"❌ Refresh failed: {e.details}")
                return 1
            last = await repository.max_refreshed_at()
    finally:
        await close_db()

    print(f"Refreshed {result.merged} countries ({result.skipped} skipped)")
    print(f"Last refreshed at: {to_iso_utc(last)}")
    return 0


async def show_status() -> int:
    await init_db()
    try:
        async with get_db_session() as session:
            repository = CountryRepository(session)
            total = await repository.count()
            last = await repository.max_refreshed_at()
    finally:
        await close_db()

    print(f"Total countries: {total}")
    print(f"Last refreshed at: {to_iso_utc(last) or 'never'}")
    return 0


async def create_tables(drop_all: bool) -> int:
    try:
        await init_db(drop_all=drop_all)
    finally:
        await close_db()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Country Cache - countries, exchange rates and estimated GDP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m country_cache.cli refresh
  python -m country_cache.cli status
  python -m country_cache.cli init-db --drop
  python -m country_cache.cli serve --port 8080
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("refresh", help="Fetch upstream sources and update the store")
    subparsers.add_parser("status", help="Show total countries and last refresh time")

    init_parser = subparsers.add_parser("init-db", help="Create database tables")
    init_parser.add_argument("--drop", action="store_true", help="Drop existing tables first")

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=Config.API_HOST, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=Config.API_PORT, help="Bind port")

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.command == "refresh":
        return asyncio.run(run_refresh())
    if args.command == "status":
        return asyncio.run(show_status())
    if args.command == "init-db":
        return asyncio.run(create_tables(args.drop))

    import uvicorn

    uvicorn.run("country_cache.main:app", host=args.host, port=args.port, log_level="info")
    return 0


if __name__ == "__main__":
    sys.exit(main())
