"""Score records and the stores that persist them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Protocol

from patternmemory.errors import MalformedRecordError

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Fixed label order of the five lines making up one record.
LABELS: tuple[str, ...] = (
    "Date and Time",
    "Rounds Played",
    "Highest Score",
    "Highest Win Streaks",
    "Number of Win Streaks",
)


@dataclass(frozen=True)
class ScoreRecord:
    played_at: datetime
    rounds_played: int
    score: int
    win_streak: int
    total_win_streaks: int

    def __post_init__(self) -> None:
        # Stored to the second.
        if self.played_at.microsecond:
            object.__setattr__(
                self, "played_at", self.played_at.replace(microsecond=0)
            )

    # -- derived values -------------------------------------------------------

    @property
    def total_score(self) -> int:
        return self.score * 2 + self.win_streak

    @property
    def average(self) -> int:
        if self.rounds_played <= 0:
            return 0
        return self.total_score // self.rounds_played

    # -- text encoding --------------------------------------------------------

    def to_lines(self) -> list[str]:
        values = (
            self.played_at.strftime(DATE_FORMAT),
            self.rounds_played,
            self.score,
            self.win_streak,
            self.total_win_streaks,
        )
        return [f"{label}: {value}" for label, value in zip(LABELS, values)]

    @classmethod
    def from_lines(
        cls, lines: list[str], first_line_number: int | None = None
    ) -> ScoreRecord:
        """Parse the five labelled lines of one record.

        Raises ``MalformedRecordError`` if a line is missing, out of order,
        or carries an unreadable value.
        """
        if len(lines) != len(LABELS):
            raise MalformedRecordError(
                f"expected {len(LABELS)} lines per record, got {len(lines)}",
                first_line_number,
            )
        values: list[str] = []
        for offset, (label, line) in enumerate(zip(LABELS, lines)):
            line_number = (
                None if first_line_number is None else first_line_number + offset
            )
            prefix = f"{label}:"
            text = line.strip()
            if not text.startswith(prefix):
                raise MalformedRecordError(
                    f"expected {label!r}, got {text!r}", line_number
                )
            values.append(text[len(prefix):].strip())

        try:
            played_at = datetime.strptime(values[0], DATE_FORMAT)
            numbers = [int(v) for v in values[1:]]
        except ValueError as exc:
            raise MalformedRecordError(str(exc), first_line_number) from exc

        return cls(played_at, *numbers)


def rank_records(records: Iterable[ScoreRecord]) -> list[ScoreRecord]:
    """Best score first; ties broken by rounds played, then most recent."""
    return sorted(
        records,
        key=lambda r: (r.score, r.rounds_played, r.played_at),
        reverse=True,
    )


class ScoreStore(Protocol):
    def append(self, record: ScoreRecord) -> None: ...

    def read_all(self) -> list[ScoreRecord]: ...


class MemoryScoreStore:
    """Keeps records in a list for the lifetime of the object."""

    def __init__(self, records: Iterable[ScoreRecord] = ()) -> None:
        self._records: list[ScoreRecord] = list(records)

    def append(self, record: ScoreRecord) -> None:
        self._records.append(record)

    def read_all(self) -> list[ScoreRecord]:
        return list(self._records)


class TextScoreStore:
    """Appends and reads records in the labelled plain-text score log."""

    def __init__(self, filepath: Path) -> None:
        self.filepath = Path(filepath)

    # -- persistence ----------------------------------------------------------

    def append(self, record: ScoreRecord) -> None:
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        with self.filepath.open("a", encoding="utf-8") as f:
            f.write("\n".join(record.to_lines()) + "\n\n")
        logger.info("Score saved to %s", self.filepath)

    def read_all(self) -> list[ScoreRecord]:
        if not self.filepath.exists():
            logger.debug("Score file %s does not exist yet", self.filepath)
            return []
        return list(parse_records(self.filepath.read_text(encoding="utf-8")))


def parse_records(text: str) -> Iterable[ScoreRecord]:
    """Yield every record in *text*, ignoring blank lines."""
    block: list[str] = []
    block_start = 1
    for line_number, line in enumerate(text.splitlines(), 1):
        if not line.strip():
            continue
        if not block:
            block_start = line_number
        block.append(line)
        if len(block) == len(LABELS):
            yield ScoreRecord.from_lines(block, block_start)
            block = []
    if block:
        raise MalformedRecordError(
            f"incomplete record ({len(block)} of {len(LABELS)} lines)",
            block_start,
        )
