import numpy as np
import pytest

from baghchal.config import EvaluationWeights
from baghchal.core import Cell, board_from_rows, create_initial_board, place_pieces
from baghchal.engine import Evaluator
from baghchal.engine.evaluator import tiger_activity

FULL_BOARD = [
    "TGGGT",
    "GGGGG",
    "GGGGG",
    "GGGGG",
    "TGGGT",
]


def test_initial_board_scores_tiger_mobility() -> None:
    evaluator = Evaluator(jitter=0)
    board = create_initial_board()

    assert evaluator(board, Cell.TIGER, 0) == pytest.approx(120.0)
    assert evaluator(board, Cell.GOAT, 0) == pytest.approx(-120.0)


def test_captures_dominate_score() -> None:
    evaluator = Evaluator(jitter=0)
    board = create_initial_board()

    assert evaluator(board, Cell.TIGER, 2) == pytest.approx(2120.0)
    assert evaluator(board, Cell.GOAT, 2) == pytest.approx(-2120.0)


def test_capture_counts_double_mobility() -> None:
    board = place_pieces(tigers=[(0, 0)], goats=[(1, 1)])

    activity = tiger_activity(board)
    assert activity.mobility == 4
    assert activity.trapped == 0
    assert Evaluator(jitter=0)(board, Cell.TIGER, 0) == pytest.approx(40.0)


def test_trapped_tigers_are_penalised() -> None:
    evaluator = Evaluator(jitter=0)
    board = board_from_rows(FULL_BOARD)

    material, mobility, trap = evaluator.breakdown(board, Cell.TIGER, 0)
    assert (material, mobility, trap) == (0.0, 0.0, -2000.0)
    assert evaluator(board, Cell.GOAT, 0) == pytest.approx(2000.0)


def test_custom_weights_are_used() -> None:
    weights = EvaluationWeights(capture=1.0, mobility=0.0, trapped_tiger=0.0, jitter=0.0)
    evaluator = Evaluator(weights)

    assert evaluator(create_initial_board(), Cell.TIGER, 3) == pytest.approx(3.0)


def test_jitter_is_bounded_and_seeded() -> None:
    board = create_initial_board()
    first = Evaluator(rng=np.random.default_rng(7), jitter=5)
    second = Evaluator(rng=np.random.default_rng(7), jitter=5)

    scores = [first(board, Cell.TIGER, 0) for _ in range(50)]
    assert all(120.0 <= score < 125.0 for score in scores)
    assert scores == [second(board, Cell.TIGER, 0) for _ in range(50)]


def test_negative_jitter_rejected() -> None:
    with pytest.raises(ValueError):
        Evaluator(jitter=-1)
