from __future__ import annotations

from typing import Tuple

import numpy as np

from baghchal.core.board import BOARD_SIZE, TOTAL_GOATS
from baghchal.core.state import Cell, MatchState, Phase

BOARD_CHANNELS = 3  # empty / tiger / goat planes
AUX_VECTOR_SIZE = 5  # side to move one-hot (2) + movement flag + placed and captured fractions


def build_board_tensor(state: MatchState) -> np.ndarray:
    """Return board tensor with shape (3, 5, 5) channel-first."""
    tensor = np.zeros((BOARD_CHANNELS, BOARD_SIZE, BOARD_SIZE), dtype=np.float32)
    for cell in Cell:
        tensor[int(cell)] = state.board == int(cell)
    return tensor


def build_aux_vector(state: MatchState, capture_goal: int) -> np.ndarray:
    aux = np.zeros((AUX_VECTOR_SIZE,), dtype=np.float32)
    aux[0 if state.turn == Cell.TIGER else 1] = 1.0
    aux[2] = 1.0 if state.phase == Phase.MOVEMENT else 0.0
    aux[3] = state.goats_placed / TOTAL_GOATS
    aux[4] = min(1.0, state.goats_captured / max(1, capture_goal))
    return aux


def state_to_numpy(state: MatchState, capture_goal: int) -> Tuple[np.ndarray, np.ndarray]:
    return build_board_tensor(state), build_aux_vector(state, capture_goal)
