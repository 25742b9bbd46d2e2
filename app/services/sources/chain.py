"""
Ordered source fallback.

Each data kind has its own ordered list of sources. They are tried one at
a time and the first non-empty result wins; when all come back empty the
deterministic sample generator answers instead. The result carries the tag
of the source that produced it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from app.config import get_settings
from app.services.sources.api_tennis import ApiTennisSource
from app.services.sources.base import BaseSource
from app.services.sources.espn import (
    EspnCalendarPairSource,
    EspnCalendarSource,
    EspnEmbeddedSource,
    EspnRankingsSource,
    EspnScoreboardSource,
)
from app.services.sources.records import DataKind, PlayerHint
from app.services.sources.sample import SampleDataGenerator
from app.services.sources.scores365 import Scores365Source
from app.services.sources.tennisprediction import TennisPredictionSource

logger = logging.getLogger(__name__)


@dataclass
class SourceResult:
    records: list[Any] = field(default_factory=list)
    source: str = SampleDataGenerator.name

    def __len__(self) -> int:
        return len(self.records)


class SourceChain:
    def __init__(
        self,
        strategies: dict[DataKind, list[BaseSource]],
        force_sample: bool = False,
        sample: SampleDataGenerator | None = None,
    ):
        self.strategies = strategies
        self.force_sample = force_sample
        self.sample = sample or SampleDataGenerator()

    async def fetch_rankings(self, limit: int = 50) -> SourceResult:
        result = await self._run(DataKind.rankings, limit, None)
        if result is not None:
            return result
        logger.info("rankings: every source empty, serving sample rankings")
        return SourceResult(self.sample.rankings(limit), self.sample.name)

    async def fetch_fixtures(
        self,
        kind: DataKind,
        limit: int,
        hint: PlayerHint | None = None,
    ) -> SourceResult:
        if kind == DataKind.rankings:
            raise ValueError("use fetch_rankings for rankings")
        result = await self._run(kind, limit, hint)
        if result is not None:
            return result
        logger.info("%s: every source empty, serving sample fixtures", kind.value)
        return SourceResult(self.sample.fixtures(kind, limit, hint), self.sample.name)

    async def _run(
        self,
        kind: DataKind,
        limit: int,
        hint: PlayerHint | None,
    ) -> SourceResult | None:
        if self.force_sample:
            logger.info("FORCE_SAMPLE set, skipping remote sources for %s", kind.value)
            return None

        for source in self.strategies.get(kind, []):
            if not source.supports(kind, hint):
                continue
            try:
                records = await source.fetch(kind, limit, hint)
            except Exception as e:
                logger.error("%r raised while fetching %s: %s", source, kind.value, e, exc_info=True)
                continue
            if records:
                logger.info("%s: %d records from %r", kind.value, len(records), source)
                return SourceResult(list(records), source.name)
            logger.debug("%s: %r returned nothing", kind.value, source)
        return None


def build_default_chain(force_sample: bool | None = None) -> SourceChain:
    settings = get_settings()
    scoreboard = EspnScoreboardSource()
    embedded = EspnEmbeddedSource()
    calendar = EspnCalendarSource()
    scores365 = Scores365Source()
    tennisprediction = TennisPredictionSource()
    api = ApiTennisSource()

    strategies = {
        DataKind.rankings: [EspnRankingsSource(), scores365, tennisprediction],
        DataKind.recent: [
            api,
            scoreboard,
            embedded,
            calendar,
            scores365,
            tennisprediction,
        ],
        DataKind.upcoming: [
            api,
            scores365,
            tennisprediction,
            EspnCalendarPairSource(),
            scoreboard,
            embedded,
            calendar,
        ],
    }
    if force_sample is None:
        force_sample = settings.force_sample
    return SourceChain(strategies, force_sample=force_sample)
