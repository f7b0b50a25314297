from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from baghchal.config import MatchConfig
from baghchal.core import (
    INITIAL_TIGER_POSITIONS,
    Cell,
    Difficulty,
    GameMode,
    Move,
    Phase,
    board_from_rows,
    count_pieces,
    place_pieces,
)
from baghchal.engine import RandomPolicy, SearchEngine
from baghchal.match import MatchController
from baghchal.match.controller import (
    CHOOSE_MESSAGE,
    INVALID_MESSAGE,
    START_MESSAGE,
    TRAPPED_MESSAGE,
    UNDO_MESSAGE,
)

CORNERS = list(INITIAL_TIGER_POSITIONS)


def pvp(difficulty: Difficulty = Difficulty.MEDIUM) -> MatchController:
    return MatchController(MatchConfig(mode=GameMode.PVP, difficulty=difficulty))


def vs_ai(side: Cell = Cell.GOAT, difficulty: Difficulty = Difficulty.EASY, seed: int = 0) -> MatchController:
    config = MatchConfig(mode=GameMode.AI, side=side, difficulty=difficulty)
    return MatchController(config, engine=SearchEngine(rng=np.random.default_rng(seed)))


def set_position(controller: MatchController, board, *, turn: Cell, placed: int, captured: int = 0) -> None:
    state = controller.state
    state.board = board
    state.turn = turn
    state.goats_placed = placed
    state.goats_captured = captured
    state.phase = Phase.MOVEMENT if placed >= 20 else Phase.PLACEMENT


def test_fresh_match() -> None:
    controller = pvp()
    state = controller.state

    assert state.turn == Cell.GOAT
    assert state.phase == Phase.PLACEMENT
    assert state.goats_placed == 0
    assert state.winner is None
    assert state.undo_remaining == 3
    assert state.message == START_MESSAGE
    assert count_pieces(state.board, Cell.TIGER) == 4


def test_goat_placement_hands_turn_to_tiger() -> None:
    controller = pvp()

    assert controller.play(Move(None, (2, 2)))
    state = controller.state
    assert state.board[2, 2] == Cell.GOAT
    assert state.goats_placed == 1
    assert state.phase == Phase.PLACEMENT
    assert state.turn == Cell.TIGER
    assert state.message == "Tiger's Turn"
    assert len(state.history) == 1


def test_illegal_move_leaves_state_untouched() -> None:
    controller = pvp()
    before = controller.state.snapshot()

    assert not controller.play(Move((0, 0), (1, 1)))
    assert not controller.play(Move(None, (0, 0)))
    assert controller.state.snapshot() == before
    assert controller.state.message == INVALID_MESSAGE
    assert len(controller.state.history) == 0


def test_tiger_capture_through_controller() -> None:
    controller = pvp()
    set_position(controller, place_pieces(tigers=CORNERS, goats=[(1, 1)]), turn=Cell.TIGER, placed=1)

    assert controller.play(Move((0, 0), (2, 2)))
    state = controller.state
    assert state.goats_captured == 1
    assert state.board[1, 1] == Cell.EMPTY
    assert state.board[2, 2] == Cell.TIGER
    assert state.winner is None
    assert state.turn == Cell.GOAT
    assert state.goats_on_board == 0


def test_reaching_capture_goal_wins_for_tiger() -> None:
    controller = pvp()
    set_position(
        controller,
        place_pieces(tigers=CORNERS, goats=[(1, 1)]),
        turn=Cell.TIGER,
        placed=5,
        captured=4,
    )

    assert controller.play(Move((0, 0), (2, 2)))
    state = controller.state
    assert state.winner == Cell.TIGER
    assert state.turn == Cell.TIGER
    assert state.message == "Tigers Win! 5 eaten."
    assert controller.legal_moves() == []
    assert not controller.play(Move(None, (3, 3)))


def test_trapping_all_tigers_wins_for_goat() -> None:
    controller = pvp()
    board = board_from_rows(["TGGGT", "GG.GG", "GG.GG", "GGGGG", "TGGGT"])
    set_position(controller, board, turn=Cell.GOAT, placed=19)

    assert controller.play(Move(None, (2, 2)))
    state = controller.state
    assert state.winner == Cell.GOAT
    assert state.goats_placed == 20
    assert state.phase == Phase.MOVEMENT
    assert state.turn == Cell.GOAT
    assert state.message == TRAPPED_MESSAGE


def test_twentieth_placement_starts_movement() -> None:
    controller = pvp()
    board = board_from_rows(["TGGGT", "GGGGG", "GGGGG", "GGGGG", "TG..T"])
    set_position(controller, board, turn=Cell.GOAT, placed=19)

    assert controller.play(Move(None, (4, 2)))
    state = controller.state
    assert state.goats_placed == 20
    assert state.phase == Phase.MOVEMENT
    assert state.turn == Cell.TIGER
    assert state.winner is None
    assert controller.legal_moves() == [Move((4, 4), (4, 3))]


@pytest.mark.parametrize("seed", range(6))
def test_random_play_keeps_invariants(seed: int) -> None:
    controller = pvp(Difficulty.EASY)
    policy = RandomPolicy(np.random.default_rng(seed))
    previous_phase = Phase.PLACEMENT

    for _ in range(150):
        state = controller.state
        if state.is_finished:
            break
        move = policy.act(state)
        if move is None:
            break
        assert controller.play(move)

        state = controller.state
        assert count_pieces(state.board, Cell.TIGER) == 4
        assert count_pieces(state.board, Cell.GOAT) == state.goats_on_board
        assert 0 <= state.goats_captured <= state.goats_placed <= 20
        assert (state.phase == Phase.MOVEMENT) == (state.goats_placed == 20)
        if previous_phase == Phase.MOVEMENT:
            assert state.phase == Phase.MOVEMENT
        previous_phase = state.phase
        assert not state.board.flags.writeable
        assert len(state.history) <= 5


def test_undo_restores_previous_snapshot() -> None:
    controller = pvp()
    controller.play(Move(None, (2, 2)))
    before = controller.state.snapshot()
    controller.play(Move((0, 0), (1, 1)))

    assert controller.undo()
    state = controller.state
    assert state.snapshot() == before
    assert state.undo_remaining == 2
    assert state.message == UNDO_MESSAGE
    assert len(state.history) == 1


def test_undo_after_capture_restores_goat() -> None:
    controller = pvp()
    set_position(controller, place_pieces(tigers=CORNERS, goats=[(1, 1)]), turn=Cell.TIGER, placed=1)
    controller.play(Move((0, 0), (2, 2)))

    assert controller.undo()
    state = controller.state
    assert state.board[1, 1] == Cell.GOAT
    assert state.board[0, 0] == Cell.TIGER
    assert state.goats_captured == 0
    assert state.turn == Cell.TIGER


def test_undo_refused_after_win() -> None:
    controller = pvp()
    set_position(
        controller,
        place_pieces(tigers=CORNERS, goats=[(1, 1)]),
        turn=Cell.TIGER,
        placed=5,
        captured=4,
    )
    controller.play(Move((0, 0), (2, 2)))
    assert controller.winner == Cell.TIGER

    assert not controller.can_undo
    assert not controller.undo()
    assert controller.winner == Cell.TIGER
    assert controller.state.goats_captured == 5
    assert controller.state.undo_remaining == 3


def test_undo_budget_is_enforced() -> None:
    controller = pvp(Difficulty.HARD)
    controller.play(Move(None, (2, 2)))
    controller.play(Move((0, 0), (0, 1)))

    assert controller.undo()
    assert controller.state.undo_remaining == 0
    assert not controller.undo()
    assert controller.state.turn == Cell.TIGER


def test_undo_needs_history() -> None:
    controller = pvp()
    assert not controller.can_undo
    assert not controller.undo()
    assert controller.state.undo_remaining == 3


def test_undo_disabled_against_ai_by_default() -> None:
    controller = vs_ai()
    controller.play(Move(None, (2, 2)))
    assert not controller.undo()

    enabled = MatchController(
        MatchConfig(mode=GameMode.AI, undo_modes=(GameMode.AI, GameMode.PVP)),
        engine=SearchEngine(rng=np.random.default_rng(0)),
    )
    enabled.play(Move(None, (2, 2)))
    assert enabled.undo()


def test_history_is_bounded_by_undo_limit() -> None:
    controller = pvp(Difficulty.EASY)
    moves = [
        Move(None, (2, 2)),
        Move((0, 0), (0, 1)),
        Move(None, (2, 1)),
        Move((0, 1), (0, 0)),
        Move(None, (2, 3)),
        Move((0, 0), (0, 1)),
        Move(None, (3, 2)),
        Move((0, 1), (0, 0)),
    ]
    for move in moves:
        assert controller.play(move)

    assert len(controller.state.history) == 5


def test_history_snapshots_do_not_alias_live_board() -> None:
    controller = pvp()
    controller.play(Move(None, (2, 2)))
    controller.play(Move((0, 0), (1, 1)))

    first = controller.state.history[0]
    assert first.board[2, 2] == Cell.EMPTY
    assert first.board[0, 0] == Cell.TIGER
    assert not first.board.flags.writeable
    assert controller.state.board[1, 1] == Cell.TIGER


def test_click_placement_selection_and_destination() -> None:
    controller = pvp()

    assert controller.click((2, 2))
    assert controller.state.turn == Cell.TIGER

    assert not controller.click((0, 0))
    assert controller.state.selected == (0, 0)
    assert controller.state.message == CHOOSE_MESSAGE
    assert set(controller.selection_targets()) == {(0, 1), (1, 0), (1, 1)}

    assert controller.click((1, 1))
    assert controller.state.board[1, 1] == Cell.TIGER
    assert controller.state.selected is None


def test_click_reselects_own_piece() -> None:
    controller = pvp()
    controller.click((2, 2))
    controller.click((0, 0))
    controller.click((4, 4))

    assert controller.state.selected == (4, 4)


def test_click_invalid_destination_clears_selection() -> None:
    controller = pvp()
    controller.click((2, 2))
    controller.click((0, 0))

    assert not controller.click((3, 3))
    assert controller.state.selected is None
    assert controller.state.message == INVALID_MESSAGE
    assert controller.state.turn == Cell.TIGER


def test_click_ignores_occupied_placement_and_off_board() -> None:
    controller = pvp()
    assert not controller.click((0, 0))
    assert not controller.click((5, 5))
    assert controller.state.goats_placed == 0


def test_ai_replies_after_human_move() -> None:
    controller = vs_ai()
    assert controller.ai_side == Cell.TIGER
    assert controller.play_ai_turn() is None

    controller.click((2, 2))
    assert not controller.is_human_turn
    assert controller.state.message == "CPU Thinking..."
    assert not controller.click((2, 3))

    move = controller.play_ai_turn()
    assert move is not None
    assert controller.state.turn == Cell.GOAT
    assert controller.state.message == "Your Turn"
    assert controller.last_move == move


def test_ai_opens_when_human_plays_tiger() -> None:
    controller = vs_ai(side=Cell.TIGER)
    assert controller.capture_goal == 3

    move = controller.play_ai_turn()
    assert move is not None and move.is_placement
    assert controller.state.turn == Cell.TIGER


def test_background_search_applies_result() -> None:
    controller = vs_ai(difficulty=Difficulty.MEDIUM)
    controller.play(Move(None, (2, 2)))

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = controller.start_ai_search(executor)
        assert future is not None
        assert controller.thinking
        assert controller.start_ai_search(executor) is None
        assert not controller.undo()
        future.result()

    assert controller.finish_ai_search(future)
    assert not controller.thinking
    assert controller.state.turn == Cell.GOAT


def test_stale_search_result_is_discarded() -> None:
    controller = vs_ai()
    controller.play(Move(None, (2, 2)))

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = controller.start_ai_search(executor)
        future.result()

    controller.restart()
    assert not controller.finish_ai_search(future)
    assert controller.state.goats_placed == 0
    assert controller.state.turn == Cell.GOAT


def test_restart_resets_everything() -> None:
    controller = pvp()
    controller.play(Move(None, (2, 2)))
    controller.play(Move((0, 0), (1, 1)))
    controller.undo()

    controller.restart()
    state = controller.state
    assert state.goats_placed == 0
    assert state.undo_remaining == 3
    assert len(state.history) == 0
    assert state.message == START_MESSAGE
    assert controller.last_move is None
