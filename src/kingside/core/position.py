"""Position — board plus side to move, castling, en passant and clocks.

Positions support a make/unmake discipline: :meth:`Position.make_move` pushes
the irreversible parts of the state onto an undo stack and
:meth:`Position.unmake_move` pops them again.  Search and legality filtering
run on that discipline; callers that want value semantics use
:func:`kingside.core.move_generator.apply_move`, which works on a copy.
"""

from __future__ import annotations

from dataclasses import dataclass

from kingside.core import zobrist
from kingside.core.board import Board
from kingside.core.enums import CastlingRights, Color, MoveFlag, PieceType
from kingside.core.move import Move
from kingside.core.piece import Piece
from kingside.core.types import Square, file_of, make_square, rank_of

# Rook hop for each castling flavour: (rook from file, rook to file)
_ROOK_HOPS: dict[MoveFlag, tuple[int, int]] = {
    MoveFlag.CASTLE_KINGSIDE: (7, 5),
    MoveFlag.CASTLE_QUEENSIDE: (0, 3),
}

# Touching one of these squares (moving from it or capturing on it) drops a right.
_RIGHTS_LOST_ON: dict[Square, CastlingRights] = {
    make_square(file, color.back_rank): lost(color)
    for color in Color
    for file, lost in (
        (0, CastlingRights.queenside),
        (7, CastlingRights.kingside),
        (4, CastlingRights.both),
    )
}


@dataclass(slots=True)
class _Undo:
    """Snapshot pushed before each move so it can be taken back."""

    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    captured: Piece | None
    key: int


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks."""

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "_key",
        "_undo",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._key = self._compute_key()
        self._undo: list[_Undo] = []

    @classmethod
    def initial(cls) -> Position:
        """The standard starting position."""
        return cls()

    # ── Make / unmake ────────────────────────────────────────────────────

    def make_move(self, move: Move) -> None:
        """Play *move* in place, pushing undo state onto the stack.

        *move* must come from a :class:`MoveGenerator` for this position.
        """
        board = self.board
        piece = board[move.from_sq]
        assert piece is not None, f"no piece on the origin square of {move}"

        capture_sq = move.to_sq
        if move.flag == MoveFlag.EN_PASSANT:
            capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
        captured = board[capture_sq]

        self._undo.append(
            _Undo(
                castling=self.castling,
                en_passant=self.en_passant,
                halfmove_clock=self.halfmove_clock,
                captured=captured,
                key=self._key,
            )
        )

        key = self._key ^ self._en_passant_key(self.side_to_move)
        key ^= zobrist.piece_key(piece, move.from_sq)
        board[move.from_sq] = None
        if captured is not None:
            key ^= zobrist.piece_key(captured, capture_sq)
            board[capture_sq] = None

        placed = piece
        if move.flag == MoveFlag.PROMOTION:
            assert move.promotion is not None, f"promotion piece missing on {move}"
            placed = Piece(piece.color, move.promotion)
        board[move.to_sq] = placed
        key ^= zobrist.piece_key(placed, move.to_sq)

        hop = _ROOK_HOPS.get(move.flag)
        if hop is not None:
            rank = rank_of(move.from_sq)
            rook_from = make_square(hop[0], rank)
            rook_to = make_square(hop[1], rank)
            rook = board[rook_from]
            assert rook is not None, f"castling without a rook on {rook_from}"
            board[rook_from] = None
            board[rook_to] = rook
            key ^= zobrist.piece_key(rook, rook_from) ^ zobrist.piece_key(rook, rook_to)

        # En passant target for the opponent
        self.en_passant = None
        if move.flag == MoveFlag.DOUBLE_PAWN:
            self.en_passant = (move.from_sq + move.to_sq) // 2

        castling = self.castling
        for sq in (move.from_sq, move.to_sq):
            lost = _RIGHTS_LOST_ON.get(sq)
            if lost is not None:
                castling &= ~lost
        if castling != self.castling:
            key ^= zobrist.castling_key(self.castling) ^ zobrist.castling_key(castling)
            self.castling = castling

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = self.side_to_move.opposite
        self._key = key ^ zobrist.side_to_move_key() ^ self._en_passant_key(self.side_to_move)

    def unmake_move(self, move: Move) -> None:
        """Take back the last :meth:`make_move`, which must have been *move*."""
        assert self._undo, "unmake_move without a matching make_move"
        state = self._undo.pop()
        board = self.board

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        piece = board[move.to_sq]
        assert piece is not None, f"nothing to take back on {move}"
        if move.flag == MoveFlag.PROMOTION:
            piece = Piece(piece.color, PieceType.PAWN)

        board[move.to_sq] = None
        board[move.from_sq] = piece
        if move.flag == MoveFlag.EN_PASSANT:
            ep_capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
            board[ep_capture_sq] = state.captured
        else:
            board[move.to_sq] = state.captured

        hop = _ROOK_HOPS.get(move.flag)
        if hop is not None:
            rank = rank_of(move.from_sq)
            rook_to = make_square(hop[1], rank)
            board[make_square(hop[0], rank)] = board[rook_to]
            board[rook_to] = None

        self.castling = state.castling
        self.en_passant = state.en_passant
        self.halfmove_clock = state.halfmove_clock
        self._key = state.key

    def captured_by(self, move: Move) -> Piece | None:
        """Piece that *move* would remove from the board, if any."""
        if move.flag == MoveFlag.EN_PASSANT:
            return self.board[make_square(file_of(move.to_sq), rank_of(move.from_sq))]
        return self.board[move.to_sq]

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Independent copy with an empty undo stack."""
        pos = Position.__new__(Position)
        pos.board = self.board.copy()
        pos.side_to_move = self.side_to_move
        pos.castling = self.castling
        pos.en_passant = self.en_passant
        pos.halfmove_clock = self.halfmove_clock
        pos.fullmove_number = self.fullmove_number
        pos._key = self._key
        pos._undo = []
        return pos

    @property
    def zobrist_hash(self) -> int:
        """Key identifying the position for repetition counting."""
        return self._key

    @property
    def ply_depth(self) -> int:
        """Number of moves currently on the undo stack."""
        return len(self._undo)

    def _compute_key(self) -> int:
        key = zobrist.castling_key(self.castling)
        if self.side_to_move == Color.BLACK:
            key ^= zobrist.side_to_move_key()
        key ^= self._en_passant_key(self.side_to_move)
        for sq, piece in self.board.items():
            key ^= zobrist.piece_key(piece, sq)
        return key

    def _en_passant_key(self, side: Color) -> int:
        """En passant contribution, present only when *side* has a pawn to take with."""
        ep = self.en_passant
        if ep is None:
            return 0
        pawn = Piece(side, PieceType.PAWN)
        rank = rank_of(ep) - side.sign
        for file in (file_of(ep) - 1, file_of(ep) + 1):
            if 0 <= file < 8 and self.board[make_square(file, rank)] == pawn:
                return zobrist.en_passant_key(ep)
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.side_to_move == other.side_to_move
            and self.castling == other.castling
            and self.en_passant == other.en_passant
            and self.halfmove_clock == other.halfmove_clock
            and self.fullmove_number == other.fullmove_number
            and self.board == other.board
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Position(side={self.side_to_move}, castling={int(self.castling)}, "
            f"ep={self.en_passant}, halfmove={self.halfmove_clock}, "
            f"fullmove={self.fullmove_number})\n{self.board!r}"
        )
