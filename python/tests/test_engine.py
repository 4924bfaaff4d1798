"""Game engine tests: scoring tiers, streaks, leveling and the end-of-game flow."""

from __future__ import annotations

import logging
import random
from datetime import datetime

import pytest

from patternmemory.engine.gameplay import GameEngine
from patternmemory.errors import (
    EmptySelectionError,
    InvalidConfigurationError,
    InvalidGameLevelError,
    InvalidStateError,
)
from patternmemory.models.cell import Cell
from patternmemory.models.level import GameLevel
from patternmemory.models.score import MemoryScoreStore, ScoreRecord

FIXED_TIME = datetime(2024, 5, 1, 13, 45, 7, 123456)


class FailingStore:
    def append(self, record: ScoreRecord) -> None:
        raise OSError("disk full")

    def read_all(self) -> list[ScoreRecord]:
        return []


# -- helpers ------------------------------------------------------------------


def _engine(level: GameLevel = GameLevel.EASY, **kwargs) -> GameEngine:
    kwargs.setdefault("store", MemoryScoreStore())
    kwargs.setdefault("rng", random.Random(7))
    kwargs.setdefault("clock", lambda: FIXED_TIME)
    return GameEngine(level, **kwargs)


def _wrong_answer(engine: GameEngine) -> list[Cell]:
    """Same length as the pattern, with the last cell swapped for a free one."""
    size = engine.board_size
    free = next(
        Cell(x, y)
        for y in range(size)
        for x in range(size)
        if Cell(x, y) not in engine.occupied
    )
    return list(engine.pattern[:-1]) + [free]


def _play(engine: GameEngine, correct: bool) -> bool:
    engine.next_round()
    answer = list(engine.pattern) if correct else _wrong_answer(engine)
    return engine.verify_selection(answer)


# -- construction -------------------------------------------------------------


def test_missing_level_is_rejected() -> None:
    with pytest.raises(InvalidGameLevelError):
        GameEngine(None)  # type: ignore[arg-type]


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(InvalidGameLevelError):
        GameEngine("impossible")  # type: ignore[arg-type]


def test_level_name_is_accepted() -> None:
    engine = GameEngine("intermediate")  # type: ignore[arg-type]
    assert engine.rule_set is GameLevel.INTERMEDIATE


def test_non_callable_listener_is_rejected() -> None:
    with pytest.raises(InvalidConfigurationError):
        GameEngine(GameLevel.EASY, on_milestone=3)  # type: ignore[arg-type]


def test_initial_state() -> None:
    engine = _engine()

    assert engine.current_round == 1
    assert engine.score == 0
    assert engine.board_size == 10
    assert engine.level is GameLevel.EASY
    assert engine.current_streak == 0
    assert engine.total_milestones == 0
    assert engine.pattern == ()
    assert engine.occupied == frozenset()
    assert not engine.is_ended


@pytest.mark.parametrize(
    "level, board_size",
    [(GameLevel.EASY, 10), (GameLevel.INTERMEDIATE, 20), (GameLevel.ADVANCED, 40)],
)
def test_rule_set_sets_starting_board(level: GameLevel, board_size: int) -> None:
    engine = _engine(level)

    assert engine.board_size == board_size
    assert engine.level is level


@pytest.mark.parametrize("level", [GameLevel.INTERMEDIATE, GameLevel.ADVANCED])
def test_reset_restores_rule_set_level_and_board(level: GameLevel) -> None:
    engine = _engine(level)
    engine.state.score = 0
    engine.set_board_size()
    assert engine.level is GameLevel.EASY

    engine.reset_game()
    assert (engine.level, engine.board_size) == (level, level.board_size)

    engine.end_game()
    assert (engine.level, engine.board_size) == (level, level.board_size)


# -- rounds -------------------------------------------------------------------


def test_next_round_stores_pattern_in_occupied_set() -> None:
    engine = _engine()

    engine.next_round()

    assert 1 <= len(engine.pattern) <= 2
    assert set(engine.pattern) <= engine.occupied
    assert all(c.within(engine.board_size) for c in engine.pattern)


def test_rounds_never_reuse_cells() -> None:
    engine = _engine()
    seen: set[Cell] = set()

    for _ in range(6):
        engine.next_round()
        assert seen.isdisjoint(engine.pattern)
        seen |= set(engine.pattern)
        engine.verify_selection(engine.pattern)

    assert engine.occupied == frozenset(seen)


def test_growth_multiplier_follows_rule_set() -> None:
    engine = _engine(GameLevel.INTERMEDIATE)

    engine.next_round()

    assert len(engine.pattern) == 3


# -- verification -------------------------------------------------------------


def test_selection_order_does_not_matter() -> None:
    engine = _engine()
    engine.state.round = 4
    engine.next_round()
    answer = list(engine.pattern)
    random.Random(1).shuffle(answer)

    assert engine.verify_selection(reversed(answer)) is True


def test_duplicate_cells_are_not_a_match() -> None:
    engine = _engine()
    engine.next_round()
    first = engine.pattern[0]

    assert engine.verify_selection([first] * len(engine.pattern)) is False


def test_wrong_length_is_not_a_match() -> None:
    engine = _engine()
    engine.next_round()

    assert engine.verify_selection(engine.pattern[:1]) is False


def test_empty_selection_leaves_state_unchanged() -> None:
    engine = _engine()
    engine.next_round()
    engine.verify_selection(engine.pattern)
    engine.next_round()
    before = (engine.score, engine.current_round, engine.current_streak)

    with pytest.raises(EmptySelectionError):
        engine.verify_selection([])

    assert (engine.score, engine.current_round, engine.current_streak) == before


def test_verify_before_any_pattern_fails() -> None:
    engine = _engine()

    with pytest.raises(InvalidStateError):
        engine.verify_selection([Cell(0, 0)])


# -- scoring ------------------------------------------------------------------


@pytest.mark.parametrize(
    "round_number, correct, delta",
    [
        (5, True, 1),
        (5, False, -2),
        (10, True, 1),
        (11, False, -1),
        (15, True, 2),
        (15, False, -1),
        (20, True, 2),
        (25, True, 10),
        (25, False, 0),
    ],
)
def test_score_delta_by_round(round_number: int, correct: bool, delta: int) -> None:
    engine = _engine()
    engine.state.round = round_number

    assert _play(engine, correct) is correct
    assert engine.score == delta


def test_correct_answer_advances_round_wrong_one_does_not() -> None:
    engine = _engine()

    _play(engine, True)
    assert engine.current_round == 2

    _play(engine, False)
    assert engine.current_round == 2


def test_score_can_go_negative() -> None:
    engine = _engine()

    _play(engine, False)
    _play(engine, False)

    assert engine.score == -4


# -- win streaks --------------------------------------------------------------


def test_three_correct_answers_fire_one_milestone() -> None:
    calls: list[int] = []
    engine = _engine(on_milestone=calls.append)

    for _ in range(3):
        _play(engine, True)

    assert calls == [3]
    assert engine.total_milestones == 1

    _play(engine, True)
    assert calls == [3]

    _play(engine, False)
    assert engine.current_streak == 0
    assert engine.total_milestones == 1


def test_milestone_repeats_every_three_in_a_row() -> None:
    calls: list[int] = []
    engine = _engine()
    engine.set_milestone_listener(calls.append)

    for _ in range(6):
        _play(engine, True)

    assert calls == [3, 6]
    assert engine.total_milestones == 2


def test_milestone_without_listener_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    engine = _engine()

    with caplog.at_level(logging.INFO, logger="patternmemory.engine.gameplay.engine"):
        for _ in range(3):
            _play(engine, True)

    assert engine.total_milestones == 1
    assert "Win streak of 3" in caplog.text


# -- board growth and difficulty ----------------------------------------------


def test_board_doubles_once_when_leaving_round_ten() -> None:
    engine = _engine()
    engine.state.round = 10

    _play(engine, True)
    assert engine.current_round == 11
    assert engine.board_size == 20

    _play(engine, True)
    assert engine.current_round == 12
    assert engine.board_size == 20


def test_wrong_answer_on_round_ten_keeps_board() -> None:
    engine = _engine()
    engine.state.round = 10

    _play(engine, False)

    assert engine.board_size == 10


@pytest.mark.parametrize(
    "score, level, board_size",
    [
        (-5, GameLevel.EASY, 10),
        (9, GameLevel.EASY, 10),
        (10, GameLevel.INTERMEDIATE, 20),
        (19, GameLevel.INTERMEDIATE, 20),
        (20, GameLevel.ADVANCED, 40),
    ],
)
def test_set_board_size_from_score(score: int, level: GameLevel, board_size: int) -> None:
    engine = _engine()
    engine.state.score = score

    engine.set_board_size()

    assert engine.level is level
    assert engine.board_size == board_size


def test_set_board_size_never_shrinks_board() -> None:
    engine = _engine()
    engine.state.board_size = 40

    engine.set_board_size()

    assert engine.level is GameLevel.EASY
    assert engine.board_size == 40


def test_easy_rule_set_has_no_post_round_hook() -> None:
    engine = _engine(GameLevel.EASY)
    engine.state.score = 9

    _play(engine, True)

    assert engine.score == 10
    assert engine.level is GameLevel.EASY


def test_intermediate_rule_set_levels_up_after_round() -> None:
    engine = _engine(GameLevel.INTERMEDIATE)
    engine.state.score = 19

    _play(engine, True)

    assert engine.score == 20
    assert engine.level is GameLevel.ADVANCED
    assert engine.board_size == 40


# -- ending and resetting -----------------------------------------------------


def test_end_game_saves_record_and_resets() -> None:
    store = MemoryScoreStore()
    engine = _engine(store=store)
    for _ in range(3):
        _play(engine, True)
    _play(engine, False)
    _play(engine, True)

    assert engine.end_game() is True

    (record,) = store.read_all()
    assert record == ScoreRecord(
        played_at=FIXED_TIME.replace(microsecond=0),
        rounds_played=5,
        score=2,
        win_streak=1,
        total_win_streaks=1,
    )
    assert engine.is_ended
    assert engine.score == 0
    assert engine.current_round == 1
    assert engine.current_streak == 0
    assert engine.total_milestones == 0
    assert engine.pattern == ()
    assert engine.occupied == frozenset()


def test_end_game_twice_saves_once(caplog: pytest.LogCaptureFixture) -> None:
    store = MemoryScoreStore()
    engine = _engine(store=store)
    _play(engine, True)

    assert engine.end_game() is True
    with caplog.at_level(logging.WARNING):
        assert engine.end_game() is False

    assert len(store.read_all()) == 1
    assert "already ended" in caplog.text


def test_failed_save_does_not_block_end_game(caplog: pytest.LogCaptureFixture) -> None:
    engine = _engine(store=FailingStore())
    _play(engine, True)

    with caplog.at_level(logging.WARNING):
        assert engine.end_game() is True

    assert engine.is_ended
    assert engine.score == 0
    assert "disk full" in caplog.text


def test_end_game_without_store() -> None:
    engine = _engine(store=None)
    _play(engine, True)

    assert engine.end_game() is True
    assert engine.is_ended


@pytest.mark.parametrize(
    "operation",
    [
        lambda e: e.next_round(),
        lambda e: e.verify_selection([Cell(0, 0)]),
        lambda e: e.set_board_size(),
    ],
    ids=["next_round", "verify_selection", "set_board_size"],
)
def test_operations_after_end_fail_fast(operation) -> None:
    engine = _engine()
    engine.end_game()

    with pytest.raises(InvalidStateError):
        operation(engine)


def test_reset_rearms_ended_game() -> None:
    engine = _engine()
    engine.end_game()

    engine.reset_game()

    assert not engine.is_ended
    engine.next_round()
    assert engine.pattern


def test_reset_during_play_clears_progress() -> None:
    engine = _engine()
    engine.state.round = 10
    _play(engine, True)
    engine.state.score = 25
    engine.set_board_size()

    engine.reset_game()

    assert engine.current_round == 1
    assert engine.score == 0
    assert engine.board_size == 10
    assert engine.level is GameLevel.EASY
    assert engine.occupied == frozenset()
    assert engine.pattern == ()
