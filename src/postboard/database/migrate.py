"""
Create the application tables.

Run with `postboard-migrate` (or `python -m postboard.database.migrate`).
Exits with status 1 when the schema cannot be created.
"""

import asyncio
import logging
import sys

from postboard.config.settings import get_settings
from postboard.core.logging import setup_logging
from postboard.database.session import Database

logger = logging.getLogger(__name__)


async def run_migrations(database: Database) -> None:
    logger.info("Starting database migrations...")
    try:
        await database.create_schema()
    finally:
        await database.dispose()
    logger.info("Migrations completed successfully")


def main() -> int:
    settings = get_settings()
    setup_logging(settings)
    try:
        asyncio.run(run_migrations(Database.from_settings(settings)))
    except Exception:
        logger.exception("Migration failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
