"""Static evaluation, always from White's point of view.

Positive scores favour White, negative scores favour Black.  The terms are
material, piece-square tables, mobility and occupation of the four centre
squares.
"""

from __future__ import annotations

from typing import Final

from kingside.core.enums import Color, PieceType
from kingside.core.move import Move
from kingside.core.move_generator import MoveGenerator
from kingside.core.piece import Piece
from kingside.core.position import Position
from kingside.core.rules import Rules
from kingside.core.types import D4, D5, E4, E5, Square, file_of, rank_of

MATE_SCORE: Final = 10_000
MOBILITY_WEIGHT: Final = 10
CENTRE_BONUS: Final = 20
CENTRE_SQUARES: Final = (D4, D5, E4, E5)

PIECE_VALUES: Final[dict[PieceType, int]] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 20_000,
}

# Tables are written from White's side with row 0 = rank 8, row 7 = rank 1.
# fmt: off
_PST: Final[dict[PieceType, tuple[tuple[int, ...], ...]]] = {
    PieceType.PAWN: (
        (  0,   0,   0,   0,   0,   0,   0,   0),
        ( 50,  50,  50,  50,  50,  50,  50,  50),
        ( 10,  10,  20,  30,  30,  20,  10,  10),
        (  5,   5,  10,  25,  25,  10,   5,   5),
        (  0,   0,   0,  20,  20,   0,   0,   0),
        (  5,  -5, -10,   0,   0, -10,  -5,   5),
        (  5,  10,  10, -20, -20,  10,  10,   5),
        (  0,   0,   0,   0,   0,   0,   0,   0),
    ),
    PieceType.KNIGHT: (
        (-50, -40, -30, -30, -30, -30, -40, -50),
        (-40, -20,   0,   0,   0,   0, -20, -40),
        (-30,   0,  10,  15,  15,  10,   0, -30),
        (-30,   5,  15,  20,  20,  15,   5, -30),
        (-30,   0,  15,  20,  20,  15,   0, -30),
        (-30,   5,  10,  15,  15,  10,   5, -30),
        (-40, -20,   0,   5,   5,   0, -20, -40),
        (-50, -40, -30, -30, -30, -30, -40, -50),
    ),
    PieceType.BISHOP: (
        (-20, -10, -10, -10, -10, -10, -10, -20),
        (-10,   0,   0,   0,   0,   0,   0, -10),
        (-10,   0,   5,  10,  10,   5,   0, -10),
        (-10,   5,   5,  10,  10,   5,   5, -10),
        (-10,   0,  10,  10,  10,  10,   0, -10),
        (-10,  10,  10,  10,  10,  10,  10, -10),
        (-10,   5,   0,   0,   0,   0,   5, -10),
        (-20, -10, -10, -10, -10, -10, -10, -20),
    ),
    PieceType.ROOK: (
        (  0,   0,   0,   0,   0,   0,   0,   0),
        (  5,  10,  10,  10,  10,  10,  10,   5),
        ( -5,   0,   0,   0,   0,   0,   0,  -5),
        ( -5,   0,   0,   0,   0,   0,   0,  -5),
        ( -5,   0,   0,   0,   0,   0,   0,  -5),
        ( -5,   0,   0,   0,   0,   0,   0,  -5),
        ( -5,   0,   0,   0,   0,   0,   0,  -5),
        (  0,   0,   0,   5,   5,   0,   0,   0),
    ),
    PieceType.QUEEN: (
        (-20, -10, -10,  -5,  -5, -10, -10, -20),
        (-10,   0,   0,   0,   0,   0,   0, -10),
        (-10,   0,   5,   5,   5,   5,   0, -10),
        ( -5,   0,   5,   5,   5,   5,   0,  -5),
        (  0,   0,   5,   5,   5,   5,   0,  -5),
        (-10,   5,   5,   5,   5,   5,   0, -10),
        (-10,   0,   5,   0,   0,   0,   0, -10),
        (-20, -10, -10,  -5,  -5, -10, -10, -20),
    ),
    PieceType.KING: (
        (-30, -40, -40, -50, -50, -40, -40, -30),
        (-30, -40, -40, -50, -50, -40, -40, -30),
        (-30, -40, -40, -50, -50, -40, -40, -30),
        (-30, -40, -40, -50, -50, -40, -40, -30),
        (-20, -30, -30, -40, -40, -30, -30, -20),
        (-10, -20, -20, -20, -20, -20, -20, -10),
        ( 20,  20,   0,   0,   0,   0,  20,  20),
        ( 20,  30,  10,   0,   0,  10,  30,  20),
    ),
}
# fmt: on


def piece_square_value(piece: Piece, sq: Square) -> int:
    """Table bonus for *piece* on *sq*; Black reads the table rotated 180°."""
    table = _PST[piece.piece_type]
    if piece.color == Color.WHITE:
        return table[7 - rank_of(sq)][file_of(sq)]
    return table[rank_of(sq)][7 - file_of(sq)]


def material_and_placement(position: Position) -> int:
    score = 0
    for sq, piece in position.board.items():
        value = PIECE_VALUES[piece.piece_type] + piece_square_value(piece, sq)
        score += value * piece.color.sign
    return score


def legal_move_count(position: Position, color: Color) -> int:
    """Legal moves *color* would have if it were on move."""
    if color == position.side_to_move:
        return len(MoveGenerator(position).generate_legal_moves())
    flipped = position.copy()
    flipped.side_to_move = color
    flipped.en_passant = None
    return len(MoveGenerator(flipped).generate_legal_moves())


def evaluate(position: Position, legal_moves: list[Move] | None = None) -> int:
    """White-relative score of *position*.

    *legal_moves* may carry the side to move's already generated moves.
    """
    if legal_moves is None:
        legal_moves = MoveGenerator(position).generate_legal_moves()
    side = position.side_to_move

    if not legal_moves:
        if Rules.is_in_check(position):
            return -MATE_SCORE * side.sign
        return 0
    if Rules.is_fifty_move_rule(position) or Rules.is_insufficient_material(position):
        return 0

    score = material_and_placement(position)

    own = len(legal_moves)
    other = legal_move_count(position, side.opposite)
    white_moves, black_moves = (own, other) if side == Color.WHITE else (other, own)
    score += (white_moves - black_moves) * MOBILITY_WEIGHT

    for sq in CENTRE_SQUARES:
        piece = position.board[sq]
        if piece is not None:
            score += CENTRE_BONUS * piece.color.sign
    return score
