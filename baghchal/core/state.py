from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Deque, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

BoardArray = NDArray[np.int8]

# Convenient tuple alias used across modules
Position = Tuple[int, int]


class Cell(IntEnum):
    EMPTY = 0
    TIGER = 1
    GOAT = 2

    @property
    def opponent(self) -> "Cell":
        if self == Cell.EMPTY:
            raise ValueError("EMPTY has no opponent.")
        return Cell.GOAT if self == Cell.TIGER else Cell.TIGER

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Phase(Enum):
    PLACEMENT = "placement"
    MOVEMENT = "movement"


class GameMode(Enum):
    AI = "ai"
    PVP = "pvp"


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class Move:
    """A placement (``origin is None``) or a step/jump between two points."""

    origin: Optional[Position]
    target: Position

    @property
    def is_placement(self) -> bool:
        return self.origin is None

    @property
    def distance(self) -> int:
        if self.origin is None:
            return 0
        return max(abs(self.target[0] - self.origin[0]), abs(self.target[1] - self.origin[1]))

    def __str__(self) -> str:
        if self.origin is None:
            return f"place {self.target}"
        return f"{self.origin} -> {self.target}"


def freeze(board: np.ndarray) -> BoardArray:
    """Return ``board`` as a read-only int8 array, copying when needed."""
    frozen = np.array(board, dtype=np.int8, copy=True)
    frozen.setflags(write=False)
    return frozen


@dataclass(frozen=True, eq=False)
class Snapshot:
    board: BoardArray
    turn: Cell
    phase: Phase
    goats_placed: int
    goats_captured: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        return (
            np.array_equal(self.board, other.board)
            and self.turn == other.turn
            and self.phase == other.phase
            and self.goats_placed == other.goats_placed
            and self.goats_captured == other.goats_captured
        )

    __hash__ = None  # type: ignore[assignment]


@dataclass
class MatchState:
    board: BoardArray  # shape (5, 5), dtype=np.int8, read-only, values Cell
    turn: Cell = Cell.GOAT
    phase: Phase = Phase.PLACEMENT
    goats_placed: int = 0
    goats_captured: int = 0
    winner: Optional[Cell] = None
    undo_remaining: int = 0
    selected: Optional[Position] = None
    message: str = ""
    history: Deque[Snapshot] = field(default_factory=deque)

    @property
    def is_finished(self) -> bool:
        return self.winner is not None

    @property
    def goats_on_board(self) -> int:
        return self.goats_placed - self.goats_captured

    def snapshot(self) -> Snapshot:
        return Snapshot(
            board=freeze(self.board),
            turn=self.turn,
            phase=self.phase,
            goats_placed=self.goats_placed,
            goats_captured=self.goats_captured,
        )

    def restore(self, snapshot: Snapshot) -> None:
        self.board = freeze(snapshot.board)
        self.turn = snapshot.turn
        self.phase = snapshot.phase
        self.goats_placed = snapshot.goats_placed
        self.goats_captured = snapshot.goats_captured
        self.selected = None

    def __repr__(self) -> str:
        board_str = "\n".join(" ".join(str(cell) for cell in row) for row in self.board)
        return (
            f"MatchState(turn={self.turn.name}, phase={self.phase.value}, "
            f"placed={self.goats_placed}, captured={self.goats_captured}, winner={self.winner})\n"
            f"{board_str}"
        )
