from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from baghchal.config import EvaluationWeights
from baghchal.core.board import neighbors
from baghchal.core.rules import capture_landing, positions_of
from baghchal.core.state import BoardArray, Cell


@dataclass(frozen=True)
class TigerActivity:
    mobility: int
    trapped: int


def tiger_activity(board: BoardArray, capture_weight: int = 2) -> TigerActivity:
    """Sum Tiger options over the board; a capture counts ``capture_weight`` steps."""
    mobility = 0
    trapped = 0
    for tiger in positions_of(board, Cell.TIGER):
        local = 0
        for neighbour in neighbors(tiger):
            occupant = board[neighbour]
            if occupant == Cell.EMPTY:
                local += 1
            elif occupant == Cell.GOAT and capture_landing(board, tiger, neighbour) is not None:
                local += capture_weight
        mobility += local
        if local == 0:
            trapped += 1
    return TigerActivity(mobility=mobility, trapped=trapped)


class Evaluator:
    """Static heuristic score of a board, higher is better for ``perspective``.

    The jitter term draws from the injected ``rng``; construct with
    ``jitter=0`` (or weights with ``jitter=0``) for a deterministic score.
    """

    def __init__(
        self,
        weights: Optional[EvaluationWeights] = None,
        *,
        rng: Optional[np.random.Generator] = None,
        jitter: Optional[float] = None,
    ) -> None:
        self.weights = weights or EvaluationWeights()
        self.rng = rng or np.random.default_rng()
        self.jitter = self.weights.jitter if jitter is None else jitter
        if self.jitter < 0:
            raise ValueError("jitter must be non-negative.")

    def breakdown(self, board: BoardArray, perspective: Cell, goats_captured: int) -> Tuple[float, float, float]:
        """Return the signed (material, mobility, trap) terms without noise."""
        sign = 1.0 if perspective == Cell.TIGER else -1.0
        activity = tiger_activity(board, self.weights.capture_mobility)
        material = sign * goats_captured * self.weights.capture
        mobility = sign * activity.mobility * self.weights.mobility
        trap = sign * activity.trapped * self.weights.trapped_tiger
        return material, mobility, trap

    def evaluate(self, board: BoardArray, perspective: Cell, goats_captured: int) -> float:
        score = sum(self.breakdown(board, perspective, goats_captured))
        if self.jitter > 0:
            score += float(self.rng.random()) * self.jitter
        return score

    __call__ = evaluate
