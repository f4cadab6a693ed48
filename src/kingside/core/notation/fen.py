"""FEN parsing and serialization."""

from __future__ import annotations

from kingside.core.board import Board
from kingside.core.enums import CastlingRights, Color, PieceType
from kingside.core.errors import InvalidPositionEncodingError, InvalidSquareError
from kingside.core.move_generator import MoveGenerator
from kingside.core.piece import Piece
from kingside.core.position import Position
from kingside.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    Raises:
        InvalidPositionEncodingError: the record is malformed, or it does not
            describe a playable position (king count, side not to move in check).
    """
    parts = fen.split() if isinstance(fen, str) else []
    if len(parts) != 6:
        raise InvalidPositionEncodingError(f"Invalid FEN (need 6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part, half_part, full_part = parts
    board = _parse_placement(placement, fen)

    # Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise InvalidPositionEncodingError(f"Invalid FEN side-to-move field: {side_part!r}")

    castling = _parse_castling(castling_part)

    # En passant
    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except InvalidSquareError:
            raise InvalidPositionEncodingError(
                f"Invalid FEN en-passant square: {ep_part!r}"
            ) from None
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise InvalidPositionEncodingError(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )

    # Clocks
    if not half_part.isdecimal():
        raise InvalidPositionEncodingError(f"Invalid FEN halfmove clock: {half_part!r}")
    if not full_part.isdecimal() or int(full_part) < 1:
        raise InvalidPositionEncodingError(f"Invalid FEN fullmove number: {full_part!r}")

    position = Position(board, side, castling, ep, int(half_part), int(full_part))
    _check_playable(position, fen)
    return position


def _parse_placement(placement: str, fen: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidPositionEncodingError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdecimal():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise InvalidPositionEncodingError(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= 8:
                    raise InvalidPositionEncodingError(f"Invalid FEN rank width: {fen!r}")
                board[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
            if file > 8:
                raise InvalidPositionEncodingError(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise InvalidPositionEncodingError(f"Invalid FEN rank width: {fen!r}")
    return board


def _parse_castling(field: str) -> CastlingRights:
    if field == "-":
        return CastlingRights.NONE
    rights = dict(_CASTLING_CHARS)
    castling = CastlingRights.NONE
    seen: set[str] = set()
    for ch in field:
        right = rights.get(ch)
        if right is None or ch in seen:
            raise InvalidPositionEncodingError(f"Invalid FEN castling field: {field!r}")
        seen.add(ch)
        castling |= right
    return castling


def _check_playable(position: Position, fen: str) -> None:
    board = position.board
    for color in Color:
        if board.count(color, PieceType.KING) != 1:
            raise InvalidPositionEncodingError(f"FEN needs exactly one {color} king: {fen!r}")
        if board.pieces_bitboard(color, PieceType.PAWN) & 0xFF000000000000FF:
            raise InvalidPositionEncodingError(f"FEN has a pawn on a back rank: {fen!r}")
    _check_castling(position, fen)
    if MoveGenerator(position).is_in_check(position.side_to_move.opposite):
        raise InvalidPositionEncodingError(f"FEN side not to move is in check: {fen!r}")


def _check_castling(position: Position, fen: str) -> None:
    """Every right needs its king on the e-file and its rook in the corner."""
    board = position.board
    for color in Color:
        rank = color.back_rank
        king_home = board[make_square(4, rank)] == Piece(color, PieceType.KING)
        for right, rook_file in (
            (CastlingRights.kingside(color), 7),
            (CastlingRights.queenside(color), 0),
        ):
            if not position.castling & right:
                continue
            rook_home = board[make_square(rook_file, rank)] == Piece(color, PieceType.ROOK)
            if not (king_home and rook_home):
                raise InvalidPositionEncodingError(
                    f"FEN castling right without its king and rook at home: {fen!r}"
                )


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = pos.board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Castling
    castling_str = "".join(ch for ch, right in _CASTLING_CHARS if pos.castling & right) or "-"

    # 3. En passant
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    return (
        f"{board_str} {pos.side_to_move.fen_char} {castling_str} {ep_str} "
        f"{pos.halfmove_clock} {pos.fullmove_number}"
    )
