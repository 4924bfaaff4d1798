"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

from patternmemory.models.cell import Cell, Pattern
from patternmemory.models.level import GameLevel

DEFAULT_ROUND = 1


class GameState:
    """Holds round, board, score and streak counters for one session."""

    def __init__(self, level: GameLevel) -> None:
        self.initial_level = level
        self.pattern: Pattern = ()
        self.occupied: set[Cell] = set()
        self.ended: bool = False
        self.reset()

    def reset(self) -> None:
        """Restore the starting values. The ended flag is left alone."""
        self.round: int = DEFAULT_ROUND
        self.level: GameLevel = self.initial_level
        self.board_size: int = self.initial_level.board_size
        self.score: int = 0
        self.current_streak: int = 0
        self.total_milestones: int = 0
        self.pattern = ()
        self.occupied.clear()

    # -- score and streak -----------------------------------------------------

    def add_score(self, delta: int) -> None:
        self.score += delta

    def extend_streak(self) -> int:
        self.current_streak += 1
        return self.current_streak

    def break_streak(self) -> None:
        self.current_streak = 0
