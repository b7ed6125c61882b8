#!/usr/bin/env python
"""
Seed the unit reference catalog.

Inserts a German and English display label for every canonical unit code the
line parser can produce. Existing units are left untouched, so the script is
safe to run on every deploy.

Run with: python scripts/seed_catalog.py

Environment Variables:
    DATABASE_URL: Async SQLAlchemy connection string
"""

import asyncio
import sys

from sqlalchemy import select

from mealcart.database import AsyncSessionLocal, Base, async_engine
from mealcart.logging_config import configure_logging, get_logger
from mealcart.models import Unit
from mealcart.normalize.units import CANONICAL_UNITS

configure_logging()
logger = get_logger(__name__)

UNIT_LABELS: dict[str, tuple[str, str]] = {
    "g": ("g", "g"),
    "kg": ("kg", "kg"),
    "ml": ("ml", "ml"),
    "l": ("l", "l"),
    "cup": ("Tasse", "cup"),
    "tbsp": ("EL", "tbsp"),
    "tsp": ("TL", "tsp"),
    "stk": ("Stück", "pc"),
    "oz": ("oz", "oz"),
    "lb": ("lb", "lb"),
}


async def seed_units() -> int:
    """Insert missing unit labels. Returns the number of units added."""
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        existing = set((await session.execute(select(Unit.key))).scalars())

        added = 0
        for key in sorted(CANONICAL_UNITS - existing):
            label_de, label_en = UNIT_LABELS.get(key, (key, key))
            session.add(Unit(key=key, label_de=label_de, label_en=label_en))
            added += 1

        await session.commit()

    await async_engine.dispose()
    return added


def main():
    """Entry point for the seed script."""
    try:
        added = asyncio.run(seed_units())
        logger.info(f"Seeded {added} units ({len(CANONICAL_UNITS)} canonical units in total)")
    except KeyboardInterrupt:
        logger.info("Seeding interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Seeding failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
