from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from baghchal.config import MatchConfig
from baghchal.core.state import Cell, GameMode
from baghchal.engine.policies import Policy
from baghchal.match import MatchController

logger = logging.getLogger(__name__)


@dataclass
class GameRecord:
    winner: Optional[Cell]
    plies: int
    goats_captured: int


@dataclass
class EvaluationResult:
    games_played: int
    tiger_wins: int
    goat_wins: int
    unfinished: int
    average_length: float

    def winrate_tiger(self) -> float:
        return self.tiger_wins / max(1, self.games_played)

    def winrate_goat(self) -> float:
        return self.goat_wins / max(1, self.games_played)


def play_game(
    tiger_policy: Policy,
    goat_policy: Policy,
    *,
    config: Optional[MatchConfig] = None,
    max_ply: int = 200,
) -> GameRecord:
    """Play one game between two policies; stops unfinished after ``max_ply`` moves."""
    controller = MatchController(config or MatchConfig(mode=GameMode.PVP))
    plies = 0
    while not controller.state.is_finished and plies < max_ply:
        policy = tiger_policy if controller.state.turn == Cell.TIGER else goat_policy
        move = policy.act(controller.state)
        if move is None or not controller.play(move):
            break
        plies += 1
    state = controller.state
    return GameRecord(winner=state.winner, plies=plies, goats_captured=state.goats_captured)


def evaluate_policies(
    tiger_policy: Policy,
    goat_policy: Policy,
    *,
    episodes: int,
    config: Optional[MatchConfig] = None,
    max_ply: int = 200,
) -> EvaluationResult:
    tiger_wins = 0
    goat_wins = 0
    unfinished = 0
    total_ply = 0

    for episode in range(episodes):
        record = play_game(tiger_policy, goat_policy, config=config, max_ply=max_ply)
        total_ply += record.plies
        if record.winner == Cell.TIGER:
            tiger_wins += 1
        elif record.winner == Cell.GOAT:
            goat_wins += 1
        else:
            unfinished += 1
        logger.debug("Game %d: winner=%s plies=%d", episode + 1, record.winner, record.plies)

    average_length = total_ply / max(1, episodes)
    return EvaluationResult(
        games_played=episodes,
        tiger_wins=tiger_wins,
        goat_wins=goat_wins,
        unfinished=unfinished,
        average_length=average_length,
    )
