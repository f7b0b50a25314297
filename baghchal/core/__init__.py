"""Core game logic for Bagh-Chal."""

from .state import Cell, Difficulty, GameMode, MatchState, Move, Phase, Position, Snapshot
from .board import (
    ADJACENCY,
    BOARD_SIZE,
    INITIAL_TIGER_POSITIONS,
    TIGER_COUNT,
    TOTAL_GOATS,
    board_from_rows,
    create_initial_board,
    is_adjacent,
    neighbors,
    place_pieces,
    render_board,
)
from .rules import (
    IllegalMoveError,
    MOVE_VECTOR_SIZE,
    all_tigers_trapped,
    apply_move,
    capture_landing,
    count_pieces,
    decode_move,
    encode_move,
    is_capture,
    is_tiger_trapped,
    legal_moves,
    legal_moves_from,
    trapped_tigers,
    undo_limit,
    valid_neighbors,
    win_capture_count,
)

__all__ = [
    "Cell",
    "Difficulty",
    "GameMode",
    "MatchState",
    "Move",
    "Phase",
    "Position",
    "Snapshot",
    "ADJACENCY",
    "BOARD_SIZE",
    "INITIAL_TIGER_POSITIONS",
    "TIGER_COUNT",
    "TOTAL_GOATS",
    "board_from_rows",
    "create_initial_board",
    "is_adjacent",
    "neighbors",
    "place_pieces",
    "render_board",
    "IllegalMoveError",
    "MOVE_VECTOR_SIZE",
    "all_tigers_trapped",
    "apply_move",
    "capture_landing",
    "count_pieces",
    "decode_move",
    "encode_move",
    "is_capture",
    "is_tiger_trapped",
    "legal_moves",
    "legal_moves_from",
    "trapped_tigers",
    "undo_limit",
    "valid_neighbors",
    "win_capture_count",
]
