"""SAN (Standard Algebraic Notation) conversion and parsing."""

from __future__ import annotations

import re

from kingside.core.enums import MoveFlag, PieceType
from kingside.core.errors import IllegalMoveError
from kingside.core.move import Move
from kingside.core.move_generator import MoveGenerator
from kingside.core.position import Position
from kingside.core.types import file_of, parse_square, rank_of, square_name

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_SAN_PIECE_REV: dict[str, PieceType] = {v: k for k, v in _SAN_PIECE.items()}

_SAN_RE = re.compile(
    r"^(?P<piece>[NBRQK])?(?P<file>[a-h])?(?P<rank>[1-8])?x?"
    r"(?P<to>[a-h][1-8])(?:=?(?P<promo>[NBRQ]))?$"
)


def move_to_san(position: Position, move: Move) -> str:
    """Convert a legal *move* to SAN given the *position* before the move."""
    board = position.board
    piece = board[move.from_sq]
    assert piece is not None, f"no piece on the origin square of {move}"
    gen = MoveGenerator(position)

    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        san = "O-O"
    elif move.flag == MoveFlag.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        san = ""
        is_capture = board[move.to_sq] is not None or move.is_en_passant

        if piece.piece_type == PieceType.PAWN:
            if is_capture:
                san += chr(ord("a") + file_of(move.from_sq))
        else:
            san += _SAN_PIECE[piece.piece_type]
            rivals = [
                m.from_sq
                for m in gen.generate_legal_moves()
                if m.to_sq == move.to_sq
                and m.from_sq != move.from_sq
                and board[m.from_sq] == piece
            ]
            if rivals:
                if all(file_of(sq) != file_of(move.from_sq) for sq in rivals):
                    san += chr(ord("a") + file_of(move.from_sq))
                elif all(rank_of(sq) != rank_of(move.from_sq) for sq in rivals):
                    san += str(rank_of(move.from_sq) + 1)
                else:
                    san += square_name(move.from_sq)

        if is_capture:
            san += "x"
        san += square_name(move.to_sq)
        if move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]

    # Check / checkmate suffix
    position.make_move(move)
    if gen.is_in_check(position.side_to_move):
        san += "+" if gen.has_legal_move() else "#"
    position.unmake_move(move)
    return san


def parse_san(position: Position, san: str) -> Move:
    """Parse a SAN string into a :class:`Move` given the current *position*.

    Raises:
        IllegalMoveError: *san* is malformed, matches no legal move, or is
            ambiguous.
    """
    legal = MoveGenerator(position).generate_legal_moves()
    clean = san.strip().rstrip("+#!?")

    if clean in ("O-O", "0-0", "O-O-O", "0-0-0"):
        flag = MoveFlag.CASTLE_KINGSIDE if len(clean) == 3 else MoveFlag.CASTLE_QUEENSIDE
        for m in legal:
            if m.flag == flag:
                return m
        raise IllegalMoveError(f"Illegal move: {san}")

    match = _SAN_RE.match(clean)
    if match is None:
        raise IllegalMoveError(f"Malformed SAN: {san!r}")

    piece_type = _SAN_PIECE_REV.get(match["piece"] or "", PieceType.PAWN)
    to_sq = parse_square(match["to"])
    promotion = _SAN_PIECE_REV.get(match["promo"] or "")
    from_file = ord(match["file"]) - ord("a") if match["file"] else None
    from_rank = int(match["rank"]) - 1 if match["rank"] else None

    candidates: list[Move] = []
    for m in legal:
        p = position.board[m.from_sq]
        if p is None or p.piece_type != piece_type or m.to_sq != to_sq:
            continue
        if m.promotion != promotion:
            continue
        if from_file is not None and file_of(m.from_sq) != from_file:
            continue
        if from_rank is not None and rank_of(m.from_sq) != from_rank:
            continue
        candidates.append(m)

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise IllegalMoveError(f"Illegal move: {san}")
    raise IllegalMoveError(f"Ambiguous move: {san} -> {[str(m) for m in candidates]}")
