"""Grid cell model for the memory pattern game."""

from __future__ import annotations

from dataclasses import dataclass

# (dx, dy) offsets of the 8 surrounding cells, in scan order.
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (dx, dy)
    for dx in (-1, 0, 1)
    for dy in (-1, 0, 1)
    if (dx, dy) != (0, 0)
)


@dataclass(frozen=True, order=True)
class Cell:
    """A coordinate pair on the board. ``x`` is the row, ``y`` the column."""

    x: int
    y: int

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError(
                f"Cell coordinates must be non-negative, got ({self.x}, {self.y})."
            )

    # -- queries --------------------------------------------------------------

    def within(self, board_size: int) -> bool:
        return self.x < board_size and self.y < board_size

    def neighbors(self, board_size: int) -> list[Cell]:
        """Return the in-bounds cells around this one (up to 8)."""
        cells: list[Cell] = []
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = self.x + dx, self.y + dy
            if 0 <= nx < board_size and 0 <= ny < board_size:
                cells.append(Cell(nx, ny))
        return cells

    def distance_to(self, other: Cell) -> float:
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    def __str__(self) -> str:
        return f"{{{self.x}, {self.y}}}"


# An ordered, non-empty run of cells the player must reproduce.
Pattern = tuple[Cell, ...]
