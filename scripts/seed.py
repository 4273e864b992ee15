"""Initialise a bulletin board database: create the schema and seed it when empty."""
import argparse
import asyncio
import logging
import sys
import time

from board.config import settings
from board.database import StorageGateway
from board.exceptions import StorageInitError
from board.repositories import post_repository


async def seed(database_url: str, seed_on_empty: bool = True) -> int:
    start = time.perf_counter()
    db = StorageGateway(database_url, seed_on_empty=seed_on_empty)
    try:
        await db.initialize()
        total = await post_repository.count_posts(db)
    finally:
        await db.shutdown()

    elapsed = time.perf_counter() - start
    print(f"Database ready in {elapsed:.2f}s: {database_url}")
    print(f"  Posts: {total}")
    return total


def main():
    parser = argparse.ArgumentParser(description="Initialise and seed the bulletin board database")
    parser.add_argument("--database-url", default=settings.DATABASE_URL, help="SQLAlchemy URL of the database")
    parser.add_argument("--no-seed", action="store_true", help="Create the schema only, even when the table is empty")
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    try:
        asyncio.run(seed(args.database_url, seed_on_empty=not args.no_seed))
    except StorageInitError as exc:
        print(f"Initialisation failed: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
