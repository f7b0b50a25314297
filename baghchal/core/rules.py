from __future__ import annotations

from typing import Iterable, List, Optional, Set, Tuple

import numpy as np

from .board import ALL_POSITIONS, BOARD_SIZE, in_bounds, neighbors
from .state import BoardArray, Cell, Difficulty, GameMode, Move, Phase, Position, freeze

NUM_POINTS = BOARD_SIZE * BOARD_SIZE
MOVE_VECTOR_SIZE = NUM_POINTS + NUM_POINTS * NUM_POINTS

_GOAT_SIDE_CAPTURES = {Difficulty.HARD: 3, Difficulty.MEDIUM: 5, Difficulty.EASY: 7}
_TIGER_SIDE_CAPTURES = {Difficulty.EASY: 3, Difficulty.MEDIUM: 5, Difficulty.HARD: 7}
_PVP_CAPTURES = 5
_UNDO_LIMITS = {Difficulty.EASY: 5, Difficulty.MEDIUM: 3, Difficulty.HARD: 1}


class IllegalMoveError(ValueError):
    pass


def _index(position: Position) -> int:
    return position[0] * BOARD_SIZE + position[1]


def _position(index: int) -> Position:
    return divmod(index, BOARD_SIZE)


def encode_move(move: Move) -> int:
    if move.origin is None:
        return _index(move.target)
    return NUM_POINTS + _index(move.origin) * NUM_POINTS + _index(move.target)


def decode_move(index: int) -> Move:
    if not 0 <= index < MOVE_VECTOR_SIZE:
        raise ValueError("Move index out of range.")
    if index < NUM_POINTS:
        return Move(None, _position(index))
    origin, target = divmod(index - NUM_POINTS, NUM_POINTS)
    return Move(_position(origin), _position(target))


def valid_neighbors(position: Position) -> Set[Position]:
    return set(neighbors(position))


def positions_of(board: BoardArray, cell: Cell) -> Iterable[Position]:
    for r, c in np.argwhere(board == int(cell)):
        yield int(r), int(c)


def count_pieces(board: BoardArray, cell: Cell) -> int:
    return int(np.count_nonzero(board == int(cell)))


def capture_landing(board: BoardArray, tiger: Position, goat: Position) -> Optional[Position]:
    """Landing point for a Tiger at ``tiger`` jumping the Goat at ``goat``, if open."""
    land_row = 2 * goat[0] - tiger[0]
    land_col = 2 * goat[1] - tiger[1]
    if in_bounds(land_row, land_col) and board[land_row, land_col] == Cell.EMPTY:
        return (land_row, land_col)
    return None


def jumped_position(move: Move) -> Optional[Position]:
    """Midpoint of a straight distance-2 move, ``None`` for anything else."""
    if move.origin is None:
        return None
    dr = move.target[0] - move.origin[0]
    dc = move.target[1] - move.origin[1]
    if dr not in (-2, 0, 2) or dc not in (-2, 0, 2) or (dr == 0 and dc == 0):
        return None
    return (move.origin[0] + dr // 2, move.origin[1] + dc // 2)


def is_capture(move: Move) -> bool:
    return jumped_position(move) is not None


def _piece_moves(board: BoardArray, origin: Position, player: Cell) -> List[Move]:
    moves: List[Move] = []
    for neighbour in neighbors(origin):
        occupant = board[neighbour]
        if occupant == Cell.EMPTY:
            moves.append(Move(origin, neighbour))
        elif player == Cell.TIGER and occupant == Cell.GOAT:
            landing = capture_landing(board, origin, neighbour)
            if landing is not None:
                moves.append(Move(origin, landing))
    return moves


def legal_moves(board: BoardArray, player: Cell, phase: Phase) -> List[Move]:
    if player == Cell.GOAT and phase == Phase.PLACEMENT:
        return [Move(None, position) for position in ALL_POSITIONS if board[position] == Cell.EMPTY]

    moves: List[Move] = []
    for origin in positions_of(board, player):
        moves.extend(_piece_moves(board, origin, player))
    return moves


def legal_moves_from(board: BoardArray, origin: Position, player: Cell, phase: Phase) -> List[Move]:
    """Legal moves of the single piece at ``origin`` (empty during Goat placement)."""
    if not in_bounds(*origin) or board[origin] != player:
        return []
    if player == Cell.GOAT and phase == Phase.PLACEMENT:
        return []
    return _piece_moves(board, origin, player)


def apply_move(board: BoardArray, move: Move, player: Cell) -> Tuple[BoardArray, bool]:
    """Return a new board with ``move`` applied and whether a Goat was captured.

    The input board is never modified. Legality is the caller's concern; only
    structurally impossible moves raise :class:`IllegalMoveError`.
    """
    if player == Cell.EMPTY:
        raise IllegalMoveError("EMPTY cannot move.")
    if not in_bounds(*move.target):
        raise IllegalMoveError(f"Target {move.target} is off the board.")
    if board[move.target] != Cell.EMPTY:
        raise IllegalMoveError(f"Target {move.target} is occupied.")

    next_board = np.array(board, dtype=np.int8, copy=True)
    captured = False

    if move.origin is None:
        if player != Cell.GOAT:
            raise IllegalMoveError("Only goats can be placed.")
    else:
        if not in_bounds(*move.origin):
            raise IllegalMoveError(f"Origin {move.origin} is off the board.")
        if board[move.origin] != player:
            raise IllegalMoveError(f"No {player.name.lower()} at {move.origin}.")
        next_board[move.origin] = Cell.EMPTY
        if player == Cell.TIGER:
            middle = jumped_position(move)
            if middle is not None and next_board[middle] == Cell.GOAT:
                next_board[middle] = Cell.EMPTY
                captured = True

    next_board[move.target] = player
    return freeze(next_board), captured


def is_tiger_trapped(board: BoardArray, position: Position) -> bool:
    for neighbour in neighbors(position):
        occupant = board[neighbour]
        if occupant == Cell.EMPTY:
            return False
        if occupant == Cell.GOAT and capture_landing(board, position, neighbour) is not None:
            return False
    return True


def trapped_tigers(board: BoardArray) -> int:
    return sum(1 for position in positions_of(board, Cell.TIGER) if is_tiger_trapped(board, position))


def all_tigers_trapped(board: BoardArray) -> bool:
    tigers = list(positions_of(board, Cell.TIGER))
    return bool(tigers) and all(is_tiger_trapped(board, position) for position in tigers)


def win_capture_count(difficulty: Difficulty, side: Cell, mode: GameMode) -> int:
    """Captures the Tigers need to win; ``side`` is the human player's side."""
    if mode == GameMode.PVP:
        return _PVP_CAPTURES
    if side == Cell.GOAT:
        return _GOAT_SIDE_CAPTURES[difficulty]
    return _TIGER_SIDE_CAPTURES[difficulty]


def undo_limit(difficulty: Difficulty) -> int:
    return _UNDO_LIMITS[difficulty]
