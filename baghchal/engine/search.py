"""Depth-limited minimax with alpha-beta pruning over immutable boards.

Every simulated move produces a fresh read-only board through
:func:`~baghchal.core.rules.apply_move`, so no two nodes of the tree share a
mutable board. Scores are always from the root player's point of view: the root
player maximizes and the opponent minimizes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional, Sequence

import numpy as np

from baghchal.config import SearchConfig
from baghchal.core.board import TOTAL_GOATS
from baghchal.core.rules import all_tigers_trapped, apply_move, is_capture, legal_moves
from baghchal.core.state import BoardArray, Cell, Difficulty, Move, Phase
from baghchal.engine.evaluator import Evaluator

logger = logging.getLogger(__name__)

EvaluationFn = Callable[[BoardArray, Cell, int], float]


@dataclass
class SearchResult:
    move: Optional[Move]
    score: float
    depth: int
    nodes: int


class SearchNode(NamedTuple):
    board: BoardArray
    phase: Phase
    goats_captured: int
    goats_placed: Optional[int] = None


class SearchEngine:
    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        *,
        evaluator: Optional[EvaluationFn] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.config = config or SearchConfig()
        self.rng = rng or np.random.default_rng()
        self.evaluator = evaluator or Evaluator(rng=self.rng)
        self.nodes = 0

    # ------------------------------------------------------------------
    def select_move(
        self,
        board: BoardArray,
        player: Cell,
        phase: Phase,
        difficulty: Difficulty,
        goats_captured: int,
        *,
        goats_placed: Optional[int] = None,
    ) -> Optional[Move]:
        moves = legal_moves(board, player, phase)
        if not moves:
            return None
        if difficulty == Difficulty.EASY:
            return self._random_move(moves, player)

        result = self.search(
            board,
            player,
            phase,
            self.config.depth_for(difficulty),
            goats_captured,
            goats_placed=goats_placed,
        )
        return result.move

    def search(
        self,
        board: BoardArray,
        player: Cell,
        phase: Phase,
        depth: int,
        goats_captured: int,
        *,
        goats_placed: Optional[int] = None,
    ) -> SearchResult:
        if depth < 1:
            raise ValueError("Search depth must be at least 1.")
        self.nodes = 0
        root = SearchNode(board, phase, goats_captured, goats_placed)
        moves = legal_moves(board, player, phase)

        best_move: Optional[Move] = None
        best_score = -math.inf
        alpha, beta = -math.inf, math.inf
        for move in moves:
            score = self.minimax(
                self.play(root, move, player),
                depth - 1,
                alpha,
                beta,
                maximizing=False,
                to_move=player.opponent,
                root_player=player,
            )
            if score > best_score:
                best_score = score
                best_move = move
            alpha = max(alpha, score)

        if best_move is None and moves:
            best_move = moves[0]
        logger.debug(
            "%s search depth=%d moves=%d nodes=%d best=%s score=%.1f",
            player.name,
            depth,
            len(moves),
            self.nodes,
            best_move,
            best_score,
        )
        return SearchResult(move=best_move, score=best_score, depth=depth, nodes=self.nodes)

    def minimax(
        self,
        node: SearchNode,
        depth: int,
        alpha: float,
        beta: float,
        *,
        maximizing: bool,
        to_move: Cell,
        root_player: Cell,
    ) -> float:
        self.nodes += 1
        win = self.config.win_score

        if all_tigers_trapped(node.board):
            return win if root_player == Cell.GOAT else -win
        if node.goats_captured >= self.config.capture_cutoff:
            return win if root_player == Cell.TIGER else -win
        if depth == 0:
            return self.evaluator(node.board, root_player, node.goats_captured)

        moves = legal_moves(node.board, to_move, node.phase)
        if not moves:
            if to_move == Cell.TIGER:
                return win if root_player == Cell.GOAT else -win
            return 0.0

        if maximizing:
            value = -math.inf
            for move in moves:
                score = self.minimax(
                    self.play(node, move, to_move),
                    depth - 1,
                    alpha,
                    beta,
                    maximizing=False,
                    to_move=to_move.opponent,
                    root_player=root_player,
                )
                value = max(value, score)
                alpha = max(alpha, score)
                if self.config.prune and beta <= alpha:
                    break
            return value

        value = math.inf
        for move in moves:
            score = self.minimax(
                self.play(node, move, to_move),
                depth - 1,
                alpha,
                beta,
                maximizing=True,
                to_move=to_move.opponent,
                root_player=root_player,
            )
            value = min(value, score)
            beta = min(beta, score)
            if self.config.prune and beta <= alpha:
                break
        return value

    @staticmethod
    def play(node: SearchNode, move: Move, player: Cell) -> SearchNode:
        board, captured = apply_move(node.board, move, player)
        phase = node.phase
        placed = node.goats_placed
        if move.is_placement and placed is not None:
            placed += 1
            if placed >= TOTAL_GOATS:
                phase = Phase.MOVEMENT
        return SearchNode(board, phase, node.goats_captured + int(captured), placed)

    # ------------------------------------------------------------------
    def _random_move(self, moves: Sequence[Move], player: Cell) -> Move:
        pool: List[Move] = list(moves)
        if player == Cell.TIGER:
            captures = [move for move in moves if is_capture(move)]
            if captures:
                pool = captures
        return pool[int(self.rng.integers(len(pool)))]


def select_move(
    board: BoardArray,
    player: Cell,
    phase: Phase,
    difficulty: Difficulty,
    goats_captured: int,
    *,
    goats_placed: Optional[int] = None,
    engine: Optional[SearchEngine] = None,
) -> Optional[Move]:
    """Pick a move for ``player``; ``None`` only when no legal move exists."""
    engine = engine or SearchEngine()
    return engine.select_move(
        board,
        player,
        phase,
        difficulty,
        goats_captured,
        goats_placed=goats_placed,
    )
