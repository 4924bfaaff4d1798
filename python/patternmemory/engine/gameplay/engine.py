"""Core gameplay logic: rounds, answer checking, scoring and leveling."""

from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Callable, Iterable

from patternmemory.engine.gamestate import GameState
from patternmemory.engine.patterngenerator import PatternGenerator
from patternmemory.errors import (
    EmptySelectionError,
    InvalidConfigurationError,
    InvalidGameLevelError,
    InvalidStateError,
)
from patternmemory.models.cell import Cell, Pattern
from patternmemory.models.level import DEFAULT_BOARD_SIZE, GameLevel, ScoringTier
from patternmemory.models.score import ScoreRecord, ScoreStore

logger = logging.getLogger(__name__)

LEVEL_UP_ROUNDS = 10
BOARD_GROWTH_FACTOR = 2
MILESTONE_THRESHOLD = 3

INTERMEDIATE_SCORE_THRESHOLD = 10
ADVANCED_SCORE_THRESHOLD = 20

MilestoneListener = Callable[[int], None]


class GameEngine:
    """Orchestrates a single memory game session.

    The engine is owned by the caller and is not thread-safe: a host that
    calls in from several threads must serialise those calls.
    """

    def __init__(
        self,
        level: GameLevel,
        store: ScoreStore | None = None,
        rng: random.Random | None = None,
        on_milestone: MilestoneListener | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if level is None:
            raise InvalidGameLevelError("Game level must not be None.")
        if not isinstance(level, GameLevel):
            try:
                level = GameLevel(level)
            except ValueError:
                raise InvalidGameLevelError(
                    f"Unknown game level {level!r}."
                ) from None
        if on_milestone is not None and not callable(on_milestone):
            raise InvalidConfigurationError("on_milestone must be callable.")

        self.rule_set = level
        self.store = store
        self.generator = PatternGenerator(rng)
        self.clock = clock
        self._milestone_listener = on_milestone
        self.state = GameState(level)

    # -- read-only views ------------------------------------------------------

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def board_size(self) -> int:
        return self.state.board_size

    @property
    def current_round(self) -> int:
        return self.state.round

    @property
    def level(self) -> GameLevel:
        return self.state.level

    @property
    def current_streak(self) -> int:
        return self.state.current_streak

    @property
    def total_milestones(self) -> int:
        return self.state.total_milestones

    @property
    def occupied(self) -> frozenset[Cell]:
        return frozenset(self.state.occupied)

    @property
    def pattern(self) -> Pattern:
        return self.state.pattern

    @property
    def is_ended(self) -> bool:
        return self.state.ended

    # -- listener -------------------------------------------------------------

    def set_milestone_listener(self, listener: MilestoneListener | None) -> None:
        self._milestone_listener = listener

    def _notify_milestone(self) -> None:
        streak = self.state.current_streak
        if self._milestone_listener is None:
            logger.info("Win streak of %d reached (no listener set)", streak)
            return
        self._milestone_listener(streak)

    # -- rounds ---------------------------------------------------------------

    def next_round(self) -> None:
        """Generate the pattern for the current round."""
        self._require_active("next_round")
        state = self.state
        state.pattern = self.generator.generate(
            state.round,
            state.board_size,
            state.pattern,
            state.occupied,
            level_multiplier=self.rule_set.growth_multiplier,
        )

    def verify_selection(self, cells: Iterable[Cell]) -> bool:
        """Check *cells* against the current pattern and apply scoring.

        Order does not matter. Returns True for a correct answer, which also
        advances the round.
        """
        self._require_active("verify_selection")
        selection = list(cells)
        if not selection:
            raise EmptySelectionError("You have not selected a pattern yet!")
        if not self.state.pattern:
            raise InvalidStateError("No pattern has been generated for this round.")

        correct = self._matches(selection, self.state.pattern)
        self._update_score(correct)

        if correct:
            if self.state.round % LEVEL_UP_ROUNDS == 0:
                self.state.board_size *= BOARD_GROWTH_FACTOR
                logger.debug("Board grows to %d", self.state.board_size)
            self.state.round += 1
            self._after_round()
        return correct

    @staticmethod
    def _matches(selection: list[Cell], pattern: Pattern) -> bool:
        if len(selection) != len(pattern):
            return False
        return set(selection) >= set(pattern)

    def _update_score(self, correct: bool) -> None:
        state = self.state
        tier = ScoringTier.for_round(state.round)
        state.add_score(tier.score_delta(correct))

        if not correct:
            state.break_streak()
            return

        streak = state.extend_streak()
        if streak % MILESTONE_THRESHOLD == 0:
            state.total_milestones += 1
            self._notify_milestone()

    def _after_round(self) -> None:
        match self.rule_set:
            case GameLevel.EASY:
                pass
            case GameLevel.INTERMEDIATE | GameLevel.ADVANCED:
                self.set_board_size()

    # -- difficulty -----------------------------------------------------------

    def set_board_size(self) -> None:
        """Pick the difficulty level from the score and grow the board to it.

        The board never shrinks: if round progression already made it larger
        than the level's size, it is kept.
        """
        self._require_active("set_board_size")
        score = self.state.score
        if score >= ADVANCED_SCORE_THRESHOLD:
            level = GameLevel.ADVANCED
        elif score >= INTERMEDIATE_SCORE_THRESHOLD:
            level = GameLevel.INTERMEDIATE
        else:
            level = GameLevel.EASY

        self.state.level = level
        self.state.board_size = max(
            self.state.board_size, DEFAULT_BOARD_SIZE * level.board_size_multiplier
        )

    # -- session --------------------------------------------------------------

    def end_game(self) -> bool:
        """Save a score record and reset. Returns False if already ended."""
        if self.state.ended:
            logger.warning("Game has already ended.")
            return False

        state = self.state
        record = ScoreRecord(
            played_at=self.clock().replace(microsecond=0),
            rounds_played=state.round,
            score=state.score,
            win_streak=state.current_streak,
            total_win_streaks=state.total_milestones,
        )
        self._save(record)

        state.reset()
        state.ended = True
        logger.info("Game ended after %d rounds", record.rounds_played)
        return True

    def reset_game(self) -> None:
        self.state.reset()
        self.state.ended = False
        logger.info("Game has been reset")

    def _save(self, record: ScoreRecord) -> None:
        if self.store is None:
            logger.info("No score store configured, record not saved")
            return
        try:
            self.store.append(record)
        except OSError as exc:
            logger.warning("Error writing score: %s", exc)

    def _require_active(self, operation: str) -> None:
        if self.state.ended:
            raise InvalidStateError(
                f"{operation}() called after the game ended; call reset_game() first."
            )
