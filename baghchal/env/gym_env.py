from __future__ import annotations

from typing import Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from baghchal.config import MatchConfig
from baghchal.core import (
    BOARD_SIZE,
    MOVE_VECTOR_SIZE,
    GameMode,
    decode_move,
    encode_move,
    render_board,
)
from baghchal.features import (
    AUX_VECTOR_SIZE,
    BOARD_CHANNELS,
    build_aux_vector,
    build_board_tensor,
)
from baghchal.match import MatchController


class BaghChalEnv(gym.Env):
    """Both sides act through ``step``; the side to move alternates after every move."""

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        *,
        config: Optional[MatchConfig] = None,
        max_ply: int = 200,
        enforce_legal_actions: bool = True,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._config = config or MatchConfig(mode=GameMode.PVP)
        self._max_ply = max_ply
        self._enforce_legal = enforce_legal_actions
        self.render_mode = render_mode

        board_shape = (BOARD_CHANNELS, BOARD_SIZE, BOARD_SIZE)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0.0, high=1.0, shape=board_shape, dtype=np.float32),
                "aux": spaces.Box(low=0.0, high=1.0, shape=(AUX_VECTOR_SIZE,), dtype=np.float32),
            }
        )
        self.action_space = spaces.Discrete(MOVE_VECTOR_SIZE)

        self.controller = MatchController(self._config)
        self.ply = 0

    @property
    def state(self):
        return self.controller.state

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        if options and "max_ply" in options:
            self._max_ply = int(options["max_ply"])
        self.controller.restart()
        self.ply = 0
        return self._build_observation(), self._build_info()

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")

        legal_mask = self.legal_action_mask()
        if not legal_mask[action_index]:
            if self._enforce_legal:
                raise ValueError("Illegal action provided and enforce_legal_actions=True.")
            observation = self._build_observation()
            return observation, -1.0, False, False, self._build_info()

        mover = self.state.turn
        self.controller.play(decode_move(int(action_index)))
        self.ply += 1

        terminated = self.state.is_finished
        truncated = not terminated and self.ply >= self._max_ply
        reward = 1.0 if self.state.winner == mover else 0.0
        return self._build_observation(), reward, terminated, truncated, self._build_info()

    def legal_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        for move in self.controller.legal_moves():
            mask[encode_move(move)] = 1
        return mask

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return render_board(self.state.board)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_observation(self) -> Dict[str, np.ndarray]:
        board = build_board_tensor(self.state)
        aux = build_aux_vector(self.state, self.controller.capture_goal)
        return {"board": board, "aux": aux}

    def _build_info(self) -> Dict[str, object]:
        return {
            "legal_action_mask": self.legal_action_mask(),
            "turn": self.state.turn,
            "winner": self.state.winner,
            "goats_captured": self.state.goats_captured,
        }
