#!/usr/bin/env python3
"""
Delete the prediction history.

Dry run by default; pass --apply to delete.

Usage:
    python -m scripts.clear_predictions
    python -m scripts.clear_predictions --apply
"""
import argparse
import asyncio
import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import AsyncSessionLocal
from app.models import Prediction

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Delete recorded predictions")
    parser.add_argument("--apply", action="store_true", help="Actually delete (default is a dry run)")
    return parser.parse_args()


async def clear_predictions(db: AsyncSession, apply: bool = False) -> int:
    """Return the number of predictions deleted (or that would be)."""
    total = (await db.execute(select(func.count(Prediction.id)))).scalar() or 0
    if not apply:
        logger.info("Dry run: %d predictions would be deleted", total)
        return total

    await db.execute(delete(Prediction))
    await db.commit()
    logger.info("Deleted %d predictions", total)
    return total


async def main(args: argparse.Namespace) -> None:
    async with AsyncSessionLocal() as db:
        await clear_predictions(db, apply=args.apply)


if __name__ == "__main__":
    asyncio.run(main(parse_args()))
