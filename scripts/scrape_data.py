#!/usr/bin/env python3
"""
Fetch rankings and matches through the source chain and persist them.

Usage:
    python -m scripts.scrape_data
    python -m scripts.scrape_data --kind upcoming --limit 200
    python -m scripts.scrape_data --skip-rankings --force-sample
"""
import argparse
import asyncio
import logging

from app.database import AsyncSessionLocal
from app.services.sources import DataKind, build_default_chain
from app.services.sync import SyncOrchestrator

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape rankings and matches")
    parser.add_argument("--kind", choices=["recent", "upcoming"], default="recent", help="Matches to fetch")
    parser.add_argument("--limit", type=int, default=50, help="Max records per fetch")
    parser.add_argument("--skip-rankings", action="store_true", help="Only fetch matches")
    parser.add_argument("--force-sample", action="store_true", help="Use sample data, no network")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args()


async def scrape(orchestrator: SyncOrchestrator, kind: DataKind, limit: int, rankings: bool = True) -> dict:
    results = {}
    if rankings:
        results["rankings"] = await orchestrator.fetch_and_persist_rankings(limit)
    results[kind.value] = await orchestrator.fetch_and_persist_fixtures(kind, limit)
    return results


async def main(args: argparse.Namespace) -> None:
    chain = build_default_chain(force_sample=True if args.force_sample else None)
    async with AsyncSessionLocal() as db:
        orchestrator = SyncOrchestrator(db, chain)
        results = await scrape(
            orchestrator, DataKind(args.kind), args.limit, rankings=not args.skip_rankings
        )

    for key, result in results.items():
        logger.info("%s: %d persisted (source: %s)", key, result["count"], result["source"])


if __name__ == "__main__":
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    asyncio.run(main(args))
