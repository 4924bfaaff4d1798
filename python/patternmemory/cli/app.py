"""Rich terminal output for the score log and headless simulated games.

Nothing here draws a board or reads keys: ``simulate`` plays the engine with
an automatic player and reports the rounds in a table.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

import rich.box
from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from patternmemory.engine.gameplay import GameEngine
from patternmemory.errors import BoardExhaustedError
from patternmemory.models.cell import Cell, Pattern
from patternmemory.models.level import GameLevel
from patternmemory.models.score import ScoreStore, rank_records

console = Console()


# -- score log ----------------------------------------------------------------


def show_scores(store: ScoreStore, top: int = 10) -> None:
    records = rank_records(store.read_all())

    if not records:
        console.print(Align.center(Text("  No scores yet.", style="dim")))
        return

    table = Table(
        box=rich.box.ROUNDED,
        border_style="dim",
        show_lines=False,
    )
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Score", justify="right", style="yellow")
    table.add_column("Rounds", justify="right", style="yellow")
    table.add_column("Streak", justify="right")
    table.add_column("Milestones", justify="right")
    table.add_column("Average", justify="right", style="cyan")
    table.add_column("Date", style="dim")

    for i, r in enumerate(records[:top], 1):
        table.add_row(
            str(i),
            str(r.score),
            str(r.rounds_played),
            str(r.win_streak),
            str(r.total_win_streaks),
            str(r.average),
            r.played_at.strftime("%Y-%m-%d %H:%M"),
        )

    panel = Panel(
        table,
        title="[bold]SCORES[/bold]",
        border_style="bright_blue",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))


# -- simulated play -----------------------------------------------------------


@dataclass
class RoundResult:
    round_number: int
    board_size: int
    pattern_size: int
    correct: bool
    score: int
    streak: int


def _wrong_answer(pattern: Pattern, board_size: int, rng: random.Random) -> list[Cell]:
    """Return the pattern with one cell swapped for a cell outside it."""
    answer = list(pattern)
    cells = set(pattern)
    if len(cells) >= board_size * board_size:
        answer.pop()
        return answer

    while True:
        cell = Cell(rng.randrange(board_size), rng.randrange(board_size))
        if cell not in cells:
            break
    answer[rng.randrange(len(answer))] = cell
    return answer


def play_rounds(
    engine: GameEngine,
    rounds: int,
    accuracy: float,
    rng: random.Random,
) -> list[RoundResult]:
    """Drive *engine* for *rounds* submissions with an automatic player.

    A correct answer is submitted in shuffled order with probability
    *accuracy*. A wrong answer keeps the round number, so the same round is
    replayed with a freshly generated pattern.
    """
    results: list[RoundResult] = []
    for _ in range(rounds):
        round_number = engine.current_round
        board_size = engine.board_size
        try:
            engine.next_round()
        except BoardExhaustedError as exc:
            console.print(f"  [yellow]{exc} Stopping early.[/yellow]")
            break
        pattern = engine.pattern

        if rng.random() < accuracy:
            answer = list(pattern)
            rng.shuffle(answer)
        else:
            answer = _wrong_answer(pattern, board_size, rng)

        correct = engine.verify_selection(answer)
        results.append(
            RoundResult(
                round_number=round_number,
                board_size=board_size,
                pattern_size=len(pattern),
                correct=correct,
                score=engine.score,
                streak=engine.current_streak,
            )
        )
    return results


def _render_results(results: list[RoundResult], level: GameLevel) -> Table:
    table = Table(
        title=f"Simulated game ({level.value})",
        title_style="bold cyan",
        box=rich.box.ROUNDED,
        border_style="dim",
    )
    table.add_column("Round", justify="right", style="dim")
    table.add_column("Board", justify="right")
    table.add_column("Cells", justify="right")
    table.add_column("Answer", justify="center")
    table.add_column("Score", justify="right", style="yellow")
    table.add_column("Streak", justify="right")

    for r in results:
        answer = "[green]correct[/green]" if r.correct else "[red]wrong[/red]"
        table.add_row(
            str(r.round_number),
            f"{r.board_size}×{r.board_size}",
            str(r.pattern_size),
            answer,
            str(r.score),
            str(r.streak),
        )
    return table


def simulate(
    engine: GameEngine,
    rounds: int,
    accuracy: float,
    rng: random.Random,
) -> list[RoundResult]:
    """Play *rounds* submissions, print them, then end the game."""
    engine.set_milestone_listener(
        lambda streak: console.print(
            f"  [bold magenta]Win streak of {streak}![/bold magenta]"
        )
    )
    results = play_rounds(engine, rounds, accuracy, rng)

    final_score = engine.score
    final_round = engine.current_round
    milestones = engine.total_milestones
    engine.end_game()

    console.print()
    console.print(Align.center(_render_results(results, engine.rule_set)))

    summary = Text()
    summary.append(f"  Final score: {final_score}", style="bold green")
    summary.append(f"   Reached round {final_round}", style="bold")
    summary.append(f"   Milestones: {milestones}", style="bold magenta")
    console.print(Align.center(summary))
    return results
