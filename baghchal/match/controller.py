"""Turn/phase state machine for a single match.

The controller is the only writer of its :class:`MatchState`. Boards are
read-only arrays and every applied move replaces ``state.board`` with a new one,
so snapshots in the undo history never alias the live board.
"""

from __future__ import annotations

import logging
from collections import deque
from concurrent.futures import Executor, Future
from typing import List, Optional, Tuple

from baghchal.config import MatchConfig
from baghchal.core.board import TOTAL_GOATS, create_initial_board, in_bounds
from baghchal.core.rules import all_tigers_trapped, apply_move, legal_moves, legal_moves_from
from baghchal.core.state import Cell, GameMode, MatchState, Move, Phase, Position
from baghchal.engine.search import SearchEngine

logger = logging.getLogger(__name__)

START_MESSAGE = "Place a Goat to start"
CHOOSE_MESSAGE = "Choose destination"
INVALID_MESSAGE = "Invalid position"
UNDO_MESSAGE = "Undo successful"
TRAPPED_MESSAGE = "Goats Win! Tigers trapped."


class MatchController:
    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        *,
        engine: Optional[SearchEngine] = None,
    ) -> None:
        self.config = config or MatchConfig()
        self.engine = engine or SearchEngine()
        self.capture_goal = self.config.capture_goal
        self.thinking = False
        self.last_move: Optional[Move] = None
        self._pending: Optional[Tuple[Future, int]] = None
        self._generation = 0
        self.state = self._fresh_state()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def winner(self) -> Optional[Cell]:
        return self.state.winner

    @property
    def ai_side(self) -> Optional[Cell]:
        return self.config.ai_side

    @property
    def is_human_turn(self) -> bool:
        return self.config.mode == GameMode.PVP or self.state.turn == self.config.side

    @property
    def can_undo(self) -> bool:
        return (
            self.config.undo_enabled
            and not self.state.is_finished
            and not self.thinking
            and self.state.undo_remaining > 0
            and len(self.state.history) > 0
        )

    def legal_moves(self) -> List[Move]:
        if self.state.is_finished:
            return []
        return legal_moves(self.state.board, self.state.turn, self.state.phase)

    def selection_targets(self) -> List[Position]:
        """Destinations reachable by the currently selected piece."""
        state = self.state
        if state.selected is None or state.is_finished:
            return []
        return [move.target for move in legal_moves_from(state.board, state.selected, state.turn, state.phase)]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def restart(self) -> None:
        self.thinking = False
        self.last_move = None
        self._pending = None
        self._generation += 1
        self.state = self._fresh_state()
        logger.debug("Match restarted (%s, %s)", self.config.mode.name, self.config.difficulty.name)

    def play(self, move: Move) -> bool:
        """Apply ``move`` for the side to move; illegal moves leave the state untouched."""
        if self.state.is_finished:
            return False
        if move not in self.legal_moves():
            self._reject()
            return False
        self._apply(move)
        return True

    def click(self, position: Position) -> bool:
        """Handle a click on ``position``; returns True when a move was applied."""
        state = self.state
        if state.is_finished or self.thinking or not self.is_human_turn:
            return False
        if not in_bounds(*position):
            return False

        content = state.board[position]
        if state.turn == Cell.GOAT and state.phase == Phase.PLACEMENT:
            if content == Cell.EMPTY:
                return self.play(Move(None, position))
            return False

        if content == state.turn:
            state.selected = position
            state.message = CHOOSE_MESSAGE
            return False

        if state.selected is not None and content == Cell.EMPTY:
            move = Move(state.selected, position)
            if move in legal_moves_from(state.board, state.selected, state.turn, state.phase):
                return self.play(move)
            self._reject()
        return False

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        state = self.state
        state.restore(state.history.pop())
        state.undo_remaining -= 1
        self.last_move = None
        state.message = UNDO_MESSAGE
        self._generation += 1
        logger.debug("Undo applied, %d remaining", state.undo_remaining)
        return True

    def play_ai_turn(self) -> Optional[Move]:
        """Search and apply a move for the computer side, if it is its turn."""
        if not self._ai_to_move() or self.thinking:
            return None
        self.thinking = True
        try:
            move = self._search(*self._search_inputs())
        finally:
            self.thinking = False
        if move is None or not self.play(move):
            return None
        return move

    def start_ai_search(self, executor: Executor) -> Optional[Future]:
        """Run the computer's search on ``executor``; at most one at a time."""
        if self.thinking or not self._ai_to_move():
            return None
        self.thinking = True
        future = executor.submit(self._search, *self._search_inputs())
        self._pending = (future, self._generation)
        return future

    def finish_ai_search(self, future: Future) -> bool:
        """Apply a finished search result if the match has not moved on since."""
        if self._pending is None or self._pending[0] is not future:
            return False
        _, generation = self._pending
        self._pending = None
        self.thinking = False
        move = future.result()
        if move is None or generation != self._generation:
            return False
        return self.play(move)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _fresh_state(self) -> MatchState:
        limit = self.config.undo_limit
        return MatchState(
            board=create_initial_board(),
            undo_remaining=limit,
            message=START_MESSAGE,
            history=deque(maxlen=limit),
        )

    def _ai_to_move(self) -> bool:
        return (
            self.config.mode == GameMode.AI
            and not self.state.is_finished
            and self.state.turn == self.config.ai_side
        )

    def _search_inputs(self) -> tuple:
        state = self.state
        return (state.board, state.turn, state.phase, state.goats_captured, state.goats_placed)

    def _search(self, board, turn, phase, goats_captured, goats_placed) -> Optional[Move]:
        return self.engine.select_move(
            board,
            turn,
            phase,
            self.config.difficulty,
            goats_captured,
            goats_placed=goats_placed,
        )

    def _reject(self) -> None:
        self.state.selected = None
        self.state.message = INVALID_MESSAGE

    def _apply(self, move: Move) -> None:
        state = self.state
        mover = state.turn
        snapshot = state.snapshot()
        board, captured = apply_move(state.board, move, mover)

        state.history.append(snapshot)
        state.board = board
        if move.is_placement:
            state.goats_placed += 1
        if captured:
            state.goats_captured += 1

        if state.goats_captured >= self.capture_goal:
            state.winner = Cell.TIGER
        elif all_tigers_trapped(board):
            state.winner = Cell.GOAT

        if state.goats_placed >= TOTAL_GOATS:
            state.phase = Phase.MOVEMENT
        if state.winner is None:
            state.turn = mover.opponent

        state.selected = None
        state.message = self._status_message()
        self.last_move = move
        self._generation += 1
        logger.debug("%s played %s (captured=%s)", mover.name, move, captured)
        if state.winner is not None:
            logger.info(
                "Match finished: %s wins with %d goats captured",
                state.winner.name,
                state.goats_captured,
            )

    def _status_message(self) -> str:
        state = self.state
        if state.winner == Cell.TIGER:
            return f"Tigers Win! {state.goats_captured} eaten."
        if state.winner == Cell.GOAT:
            return TRAPPED_MESSAGE
        if self.config.mode == GameMode.PVP:
            return f"{state.turn.label}'s Turn"
        return "Your Turn" if state.turn == self.config.side else "CPU Thinking..."
