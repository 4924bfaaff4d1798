from patternmemory.models.cell import Cell, Pattern
from patternmemory.models.level import DEFAULT_BOARD_SIZE, GameLevel, ScoringTier
from patternmemory.models.score import (
    MemoryScoreStore,
    ScoreRecord,
    ScoreStore,
    TextScoreStore,
    rank_records,
)

__all__ = [
    "Cell",
    "DEFAULT_BOARD_SIZE",
    "GameLevel",
    "MemoryScoreStore",
    "Pattern",
    "ScoreRecord",
    "ScoreStore",
    "ScoringTier",
    "TextScoreStore",
    "rank_records",
]
