"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, collabdoc.configs
System role: Database schema initialization

Usage:
    python -m collabdoc.boundary.db.create_tables
"""

import asyncio
import logging

from collabdoc.boundary.db.base import Base
from collabdoc.boundary.db.connection import dispose_engine, get_async_engine

# Import all models to register them with Base.metadata
import collabdoc.boundary.db.models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables() -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: calls CREATE TABLE IF NOT EXISTS for each model, so safe
    to run multiple times. Existing tables remain unchanged.

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created", extra={"tables": sorted(Base.metadata.tables)})


async def _main() -> None:
    await create_all_tables()
    await dispose_engine()


if __name__ == "__main__":
    from collabdoc.observability.logger import configure_logging

    configure_logging()
    asyncio.run(_main())
