"""Generates the cell patterns the player has to reproduce."""

from __future__ import annotations

import logging
import random
from typing import Collection, Iterator

from patternmemory.errors import BoardExhaustedError, InvalidConfigurationError
from patternmemory.models.cell import Cell, Pattern

logger = logging.getLogger(__name__)

# Rejection-sampling attempts per board cell before falling back to a
# choice among the free cells.
_SEED_ATTEMPTS_PER_CELL = 4


class PatternGenerator:
    """Builds patterns by a random walk over free cells.

    Each step tries, in order:

    1. a free neighbour of the current cell,
    2. a free neighbour of any earlier cell of the pattern,
    3. the free cell nearest to the pattern anywhere on the board.

    The third tier can jump, so patterns are not guaranteed to be connected.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def generate(
        self,
        round_number: int,
        board_size: int,
        previous_selection: Collection[Cell],
        occupied: set[Cell],
        level_multiplier: int = 1,
    ) -> Pattern:
        """Return a new pattern for *round_number*.

        *occupied* is updated in place: every cell of the returned pattern is
        added to it. Raises ``BoardExhaustedError`` if no cell is free to
        start from.
        """
        if board_size < 1:
            raise InvalidConfigurationError(
                f"board_size must be positive, got {board_size}."
            )
        if level_multiplier < 1:
            raise InvalidConfigurationError(
                f"level_multiplier must be positive, got {level_multiplier}."
            )

        current = self._pick_seed(board_size, previous_selection, occupied)
        pattern: list[Cell] = [current]
        occupied.add(current)

        for _ in range(round_number * level_multiplier):
            nxt = self._step_from(current, board_size, occupied)
            if nxt is None:
                nxt = self._step_from_pattern(pattern, board_size, occupied)
            if nxt is None:
                nxt = self._nearest_free(pattern, board_size, occupied)
                if nxt is None:
                    logger.debug(
                        "Board full after %d cells, stopping early", len(pattern)
                    )
                    break
                logger.debug("No free neighbour, jumping to %s", nxt)

            pattern.append(nxt)
            occupied.add(nxt)
            current = nxt

        logger.debug(
            "Round %d pattern on %dx%d board: %d cells",
            round_number, board_size, board_size, len(pattern),
        )
        return tuple(pattern)

    # -- helpers --------------------------------------------------------------

    def _pick_seed(
        self,
        board_size: int,
        previous_selection: Collection[Cell],
        occupied: set[Cell],
    ) -> Cell:
        def is_free(cell: Cell) -> bool:
            return cell not in occupied and cell not in previous_selection

        for _ in range(board_size * board_size * _SEED_ATTEMPTS_PER_CELL):
            cell = Cell(self.rng.randrange(board_size), self.rng.randrange(board_size))
            if is_free(cell):
                return cell

        free = [c for c in _scan(board_size) if is_free(c)]
        if not free:
            raise BoardExhaustedError(
                f"No free cell left on the {board_size}x{board_size} board."
            )
        return self.rng.choice(free)

    def _step_from(
        self, cell: Cell, board_size: int, occupied: set[Cell]
    ) -> Cell | None:
        candidates = [n for n in cell.neighbors(board_size) if n not in occupied]
        if not candidates:
            return None
        return self.rng.choice(candidates)

    def _step_from_pattern(
        self, pattern: list[Cell], board_size: int, occupied: set[Cell]
    ) -> Cell | None:
        for cell in pattern:
            nxt = self._step_from(cell, board_size, occupied)
            if nxt is not None:
                return nxt
        return None

    @staticmethod
    def _nearest_free(
        pattern: list[Cell], board_size: int, occupied: set[Cell]
    ) -> Cell | None:
        nearest: Cell | None = None
        best = float("inf")
        for cell in _scan(board_size):
            if cell in occupied:
                continue
            distance = min(cell.distance_to(p) for p in pattern)
            if distance < best:
                best = distance
                nearest = cell
        return nearest


def _scan(board_size: int) -> Iterator[Cell]:
    """Every cell of the board in row-major order."""
    for x in range(board_size):
        for y in range(board_size):
            yield Cell(x, y)
