"""Core domain layer — pure chess logic with zero external dependencies.

Quick start::

    from kingside.core import MoveGenerator, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    for move in MoveGenerator(pos).generate_legal_moves():
        print(move)
"""

from kingside.core.board import Board
from kingside.core.enums import PROMOTION_TYPES, CastlingRights, Color, MoveFlag, PieceType
from kingside.core.errors import (
    ChessError,
    IllegalMoveError,
    InvalidMessageError,
    InvalidPositionEncodingError,
    InvalidSettingsError,
    InvalidSquareError,
    InvalidStateTransitionError,
    PendingPromotionError,
)
from kingside.core.move import Move
from kingside.core.move_generator import MoveGenerator, apply_move
from kingside.core.notation import (
    STARTING_FEN,
    move_to_san,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from kingside.core.piece import Piece
from kingside.core.position import Position
from kingside.core.rules import Rules
from kingside.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
    to_square,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "MoveFlag",
    "PieceType",
    "PROMOTION_TYPES",
    # Errors
    "ChessError",
    "IllegalMoveError",
    "InvalidMessageError",
    "InvalidPositionEncodingError",
    "InvalidSettingsError",
    "InvalidSquareError",
    "InvalidStateTransitionError",
    "PendingPromotionError",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    "to_square",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    "apply_move",
    # Notation
    "STARTING_FEN",
    "move_to_san",
    "parse_san",
    "position_from_fen",
    "position_to_fen",
]
