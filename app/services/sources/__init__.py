"""
Remote ranking and fixture sources.

Sources:
- EspnRankingsSource, EspnScoreboardSource, EspnEmbeddedSource,
  EspnCalendarSource, EspnCalendarPairSource: ESPN pages and site API
- Scores365Source: 365Scores tennis page
- TennisPredictionSource: TennisPrediction.com
- ApiTennisSource: api-tennis.com (needs an API key)
- SampleDataGenerator: deterministic fallback data
- SourceChain: ordered fallback across the above
"""
from app.services.sources.records import (
    DataKind,
    FixtureRecord,
    PlayerHint,
    RankingEntry,
    build_fixture,
    build_ranking_entry,
)
from app.services.sources.base import BaseSource
from app.services.sources.chain import SourceChain, SourceResult, build_default_chain
from app.services.sources.sample import SampleDataGenerator

__all__ = [
    "DataKind",
    "FixtureRecord",
    "PlayerHint",
    "RankingEntry",
    "build_fixture",
    "build_ranking_entry",
    "BaseSource",
    "SourceChain",
    "SourceResult",
    "build_default_chain",
    "SampleDataGenerator",
]
