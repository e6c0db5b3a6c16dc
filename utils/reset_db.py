import argparse
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from core.database import engine
from models import Base

log = logging.getLogger(__name__)


async def async_reset_database(bind: AsyncEngine = engine, recreate: bool = True) -> None:
    log.info("Dropping all tables...")
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all, checkfirst=True)

    if not recreate:
        log.info("Tables dropped.")
        return

    log.info("Recreating all tables...")
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    log.info("Database schema has been reset.")


def reset_database(recreate: bool = True) -> None:
    async def _run():
        try:
            await async_reset_database(recreate=recreate)
        finally:
            await engine.dispose()

    asyncio.run(_run())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description="Drop and recreate the Pixelgram tables.")
    parser.add_argument("--drop-only", action="store_true", help="drop the tables without recreating them")
    args = parser.parse_args()
    reset_database(recreate=not args.drop_only)
