"""Level policies and round-based scoring tiers."""

from __future__ import annotations

from enum import StrEnum

DEFAULT_BOARD_SIZE = 10

EASY_ROUND_LIMIT = 10
INTERMEDIATE_ROUND_LIMIT = 20


class GameLevel(StrEnum):
    """Rule set / difficulty level.

    Used in two places: the rule set an engine is built with (growth
    multiplier, starting board, post-round hook) and the coarse
    score-derived difficulty set by ``GameEngine.set_board_size``.
    """

    EASY = "easy"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def board_size_multiplier(self) -> int:
        match self:
            case GameLevel.EASY:
                return 1
            case GameLevel.INTERMEDIATE:
                return 2
            case GameLevel.ADVANCED:
                return 4

    @property
    def growth_multiplier(self) -> int:
        """Number of growth steps per round number."""
        match self:
            case GameLevel.EASY:
                return 1
            case GameLevel.INTERMEDIATE:
                return 2
            case GameLevel.ADVANCED:
                return 3

    @property
    def board_size(self) -> int:
        return DEFAULT_BOARD_SIZE * self.board_size_multiplier


class ScoringTier(StrEnum):
    """Reward/penalty band selected by the current round number."""

    EASY = "easy"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def for_round(cls, round_number: int) -> ScoringTier:
        if round_number <= EASY_ROUND_LIMIT:
            return cls.EASY
        if round_number <= INTERMEDIATE_ROUND_LIMIT:
            return cls.INTERMEDIATE
        return cls.ADVANCED

    @property
    def reward(self) -> int:
        match self:
            case ScoringTier.EASY:
                return 1
            case ScoringTier.INTERMEDIATE:
                return 2
            case ScoringTier.ADVANCED:
                return 10

    @property
    def penalty(self) -> int:
        """Signed score change for an incorrect answer."""
        match self:
            case ScoringTier.EASY:
                return -2
            case ScoringTier.INTERMEDIATE:
                return -1
            case ScoringTier.ADVANCED:
                return 0

    def score_delta(self, correct: bool) -> int:
        return self.reward if correct else self.penalty
