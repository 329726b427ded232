"""Database initialization script using SQLAlchemy create_all().

Creates the tracked player table without a migration tool.
"""

import asyncio
import sys
from typing import NoReturn

import structlog
from sqlalchemy.exc import SQLAlchemyError

from tft_tracker.core import Base, get_db_manager

# Register ORM models on Base.metadata
from tft_tracker.features.players.orm_models import TrackedPlayerORM  # noqa: F401

logger = structlog.get_logger(__name__)


async def init_db() -> None:
    """Create all tables defined in models.

    Raises:
        SQLAlchemyError: If database connection or table creation fails
    """
    engine = get_db_manager().engine
    try:
        async with engine.begin() as conn:
            logger.info("Creating database tables...")
            await conn.run_sync(Base.metadata.create_all)

        logger.info(
            "Database initialization completed successfully",
            tables_created=len(Base.metadata.tables),
            table_names=list(Base.metadata.tables.keys()),
        )
    except SQLAlchemyError as e:
        logger.error(
            "Database initialization failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise


async def drop_all_tables() -> None:
    """Drop all tables from the database.

    WARNING: This is destructive and will delete all data!
    """
    engine = get_db_manager().engine
    try:
        logger.warning("Dropping all database tables...")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("All database tables dropped successfully")
    except SQLAlchemyError as e:
        logger.error(
            "Failed to drop database tables",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise


async def _run(command: str) -> None:
    try:
        if command == "init":
            await init_db()
        elif command == "drop":
            await drop_all_tables()
        elif command == "reset":
            await drop_all_tables()
            await init_db()
    finally:
        await get_db_manager().close()


def main() -> NoReturn:
    """Run CLI for database initialization commands.

    Usage:
        python -m tft_tracker.init_db [init|drop|reset]
    """
    command = sys.argv[1] if len(sys.argv) > 1 else "init"

    if command not in ("init", "drop", "reset"):
        logger.error(f"Unknown command: {command}")
        print("Usage: python -m tft_tracker.init_db [init|drop|reset]")
        sys.exit(1)

    asyncio.run(_run(command))
    sys.exit(0)


if __name__ == "__main__":
    main()
