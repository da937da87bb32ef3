"""Seed the database with the default level catalog.

Usage: python scripts/seed_levels.py
"""

import asyncio
import sys
from pathlib import Path

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.catalog_seed import SEED_LEVELS, seed_levels
from app.config import settings
from app.database import async_session, init_db


async def seed() -> None:
    # Ensure data directory exists
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)

    # Create tables
    await init_db()
    print("Database tables created.")

    async with async_session() as session:
        inserted, updated = await seed_levels(session)

    print(f"Seed data complete: {inserted} inserted, {updated} updated ({len(SEED_LEVELS)} levels).")


if __name__ == "__main__":
    asyncio.run(seed())
