"""Board geometry: the 5x5 grid, its adjacency graph and text conversion."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np

from .state import BoardArray, Cell, Position, freeze

BOARD_SIZE = 5
TOTAL_GOATS = 20
TIGER_COUNT = 4
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)
INITIAL_TIGER_POSITIONS: Tuple[Position, ...] = (
    (0, 0),
    (0, BOARD_SIZE - 1),
    (BOARD_SIZE - 1, 0),
    (BOARD_SIZE - 1, BOARD_SIZE - 1),
)

_SYMBOLS = {Cell.EMPTY: ".", Cell.TIGER: "T", Cell.GOAT: "G"}
_CELLS = {symbol: cell for cell, symbol in _SYMBOLS.items()}


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def _build_adjacency() -> Dict[Position, Tuple[Position, ...]]:
    # Every intersection is treated as 8-connected, diagonals included.
    graph: Dict[Position, Tuple[Position, ...]] = {}
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            graph[(row, col)] = tuple(
                (row + dr, col + dc) for dr, dc in DIRECTIONS if in_bounds(row + dr, col + dc)
            )
    return graph


ADJACENCY: Dict[Position, Tuple[Position, ...]] = _build_adjacency()
ALL_POSITIONS: Tuple[Position, ...] = tuple(ADJACENCY)


def neighbors(position: Position) -> Tuple[Position, ...]:
    try:
        return ADJACENCY[position]
    except KeyError:
        raise ValueError(f"Position {position} is off the board.") from None


def is_adjacent(first: Position, second: Position) -> bool:
    dr = abs(first[0] - second[0])
    dc = abs(first[1] - second[1])
    return dr <= 1 and dc <= 1 and (dr + dc) > 0


def create_initial_board() -> BoardArray:
    board = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    for row, col in INITIAL_TIGER_POSITIONS:
        board[row, col] = Cell.TIGER
    return freeze(board)


def place_pieces(
    tigers: Iterable[Position] = (),
    goats: Iterable[Position] = (),
) -> BoardArray:
    """Build a board holding exactly the given pieces."""
    board = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    for row, col in tigers:
        board[row, col] = Cell.TIGER
    for row, col in goats:
        if board[row, col] != Cell.EMPTY:
            raise ValueError(f"Position {(row, col)} is already occupied.")
        board[row, col] = Cell.GOAT
    return freeze(board)


def board_from_rows(rows: Sequence[str]) -> BoardArray:
    """Parse rows such as ``"T...T"`` into a board (whitespace is ignored)."""
    cleaned = ["".join(row.split()) for row in rows]
    if len(cleaned) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in cleaned):
        raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}.")
    board = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    for r, row in enumerate(cleaned):
        for c, symbol in enumerate(row.upper()):
            if symbol not in _CELLS:
                raise ValueError(f"Unknown board symbol {symbol!r}.")
            board[r, c] = _CELLS[symbol]
    return freeze(board)


def render_board(board: BoardArray) -> str:
    rows: List[str] = []
    for r in range(BOARD_SIZE):
        rows.append("".join(_SYMBOLS[Cell(int(board[r, c]))] for c in range(BOARD_SIZE)))
    return "\n".join(rows)
