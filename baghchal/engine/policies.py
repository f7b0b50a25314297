from __future__ import annotations

from typing import Optional

import numpy as np

from baghchal.config import EvaluationWeights, SearchConfig
from baghchal.core.rules import legal_moves
from baghchal.core.state import Difficulty, MatchState, Move
from baghchal.engine.evaluator import Evaluator
from baghchal.engine.search import SearchEngine


class Policy:
    """Policy interface choosing a move for the side to move in ``state``."""

    def act(self, state: MatchState) -> Optional[Move]:
        raise NotImplementedError

    def spawn(self, seed: Optional[int] = None) -> "Policy":
        """Return a copy of this policy with its own random stream."""
        return self


class RandomPolicy(Policy):
    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng = rng or np.random.default_rng()

    def act(self, state: MatchState) -> Optional[Move]:
        moves = legal_moves(state.board, state.turn, state.phase)
        if not moves:
            return None
        return moves[int(self.rng.integers(len(moves)))]

    def spawn(self, seed: Optional[int] = None) -> "RandomPolicy":
        return RandomPolicy(np.random.default_rng(seed))


class EnginePolicy(Policy):
    """Plays at a fixed difficulty through :class:`SearchEngine`."""

    def __init__(
        self,
        difficulty: Difficulty,
        *,
        search_config: Optional[SearchConfig] = None,
        weights: Optional[EvaluationWeights] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.difficulty = difficulty
        self._search_config = search_config
        self._weights = weights
        rng = rng or np.random.default_rng()
        self.engine = SearchEngine(
            search_config,
            evaluator=Evaluator(weights, rng=rng),
            rng=rng,
        )

    def act(self, state: MatchState) -> Optional[Move]:
        return self.engine.select_move(
            state.board,
            state.turn,
            state.phase,
            self.difficulty,
            state.goats_captured,
            goats_placed=state.goats_placed,
        )

    def spawn(self, seed: Optional[int] = None) -> "EnginePolicy":
        return EnginePolicy(
            self.difficulty,
            search_config=self._search_config,
            weights=self._weights,
            rng=np.random.default_rng(seed),
        )
