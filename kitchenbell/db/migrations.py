"""Database migration runner."""

import logging
from pathlib import Path

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


async def get_schema_version(db: aiosqlite.Connection) -> int:
    """Read the schema version stamped on the database file."""
    async with db.execute("PRAGMA user_version") as cursor:
        row = await cursor.fetchone()
        return row[0] if row else 0


async def run_migrations(db_path: Path) -> None:
    """Bring the database up to the current schema version.

    Version 1 creates the key-value table from schema.sql. Later versions
    can be appended as additional steps keyed on the stored version.
    """
    async with aiosqlite.connect(db_path) as db:
        version = await get_schema_version(db)
        if version >= SCHEMA_VERSION:
            logger.debug(f"Database at {db_path} already at schema v{version}")
            return

        schema_sql = (Path(__file__).parent / "schema.sql").read_text()
        await db.executescript(schema_sql)
        await db.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        await db.commit()

        logger.info(f"Database at {db_path} migrated v{version} -> v{SCHEMA_VERSION}")
