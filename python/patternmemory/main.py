#!/usr/bin/env python3
"""Pattern memory game tools.

Usage::

    patternmemory scores                      # saved scores, best first
    patternmemory scores -f other.txt -n 5    # another log, top 5
    patternmemory simulate -r 30 --seed 7     # headless game, auto player
    patternmemory simulate -l advanced -a 0.6 --no-save
"""

import logging
import random
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from patternmemory.cli import app as cli_app
from patternmemory.engine.gameplay import GameEngine
from patternmemory.errors import MalformedRecordError
from patternmemory.models.level import GameLevel
from patternmemory.models.score import TextScoreStore

DATA_DIR = Path("data")
SCORE_FILE = DATA_DIR / "score.txt"

app = typer.Typer(add_completion=False)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=cli_app.console, show_path=False)],
        force=True,
    )


# -- commands -----------------------------------------------------------------


@app.command()
def scores(
    file: Path = typer.Option(
        SCORE_FILE, "-f", "--file",
        help="Score log to read.",
    ),
    top: int = typer.Option(
        10, "-n", "--top",
        min=1,
        help="Number of records to show.",
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose"),
) -> None:
    """Show saved scores, best first."""
    _configure_logging(verbose)
    try:
        cli_app.show_scores(TextScoreStore(file), top=top)
    except MalformedRecordError as exc:
        cli_app.console.print(
            f"  Malformed score log {file}: {exc}", style="red", markup=False
        )
        raise typer.Exit(1)


@app.command()
def simulate(
    rounds: int = typer.Option(
        20, "-r", "--rounds",
        min=1, max=200,
        help="Number of answers the automatic player submits.",
    ),
    accuracy: float = typer.Option(
        0.8, "-a", "--accuracy",
        min=0.0, max=1.0,
        help="Probability that an answer is correct.",
    ),
    level: GameLevel = typer.Option(
        GameLevel.EASY, "-l", "--level",
        help="Rule set the engine is built with.",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Seed for reproducible games.",
    ),
    file: Path = typer.Option(
        SCORE_FILE, "-f", "--file",
        help="Score log the final record is appended to.",
    ),
    no_save: bool = typer.Option(
        False, "--no-save",
        help="Do not write the final score.",
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose"),
) -> None:
    """Play a headless game with an automatic player."""
    _configure_logging(verbose)
    rng = random.Random(seed)
    store = None if no_save else TextScoreStore(file)
    engine = GameEngine(level, store=store, rng=rng)
    cli_app.simulate(engine, rounds, accuracy, rng)


if __name__ == "__main__":
    app()
