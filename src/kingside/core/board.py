"""Board — piece placement on the 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator

from kingside.core.enums import Color, PieceType
from kingside.core.piece import Piece
from kingside.core.types import Square, make_square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def iter_bits(bitboard: int) -> Iterator[Square]:
    """Yield the set squares of *bitboard*, lowest first."""
    while bitboard:
        lsb = bitboard & -bitboard
        yield lsb.bit_length() - 1
        bitboard ^= lsb


class Board:
    """Mutable 64-square board.

    Alongside the square array the board keeps one occupancy bitboard per
    (color, piece type) so the move generator can walk pieces without
    scanning all 64 squares.
    """

    __slots__ = ("_squares", "_occupancy")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # Index: color * 6 + (piece_type - 1)
        self._occupancy: list[int] = [0] * 12

    @staticmethod
    def _slot(color: Color, piece_type: PieceType) -> int:
        return int(color) * 6 + int(piece_type) - 1

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        old = self._squares[sq]
        if old is piece:
            return
        mask = 1 << sq
        if old is not None:
            self._occupancy[self._slot(old.color, old.piece_type)] &= ~mask
        self._squares[sq] = piece
        if piece is not None:
            self._occupancy[self._slot(piece.color, piece.piece_type)] |= mask

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    # -- Queries --------------------------------------------------------------

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        """Bitboard of squares holding *color*'s *piece_type*."""
        return self._occupancy[self._slot(color, piece_type)]

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        return list(iter_bits(self.pieces_bitboard(color, piece_type)))

    def count(self, color: Color, piece_type: PieceType) -> int:
        return self.pieces_bitboard(color, piece_type).bit_count()

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return bool(self.pieces_bitboard(color, piece_type))

    def all_pieces_bitboard(self, color: Color) -> int:
        base = int(color) * 6
        occ = 0
        for bb in self._occupancy[base : base + 6]:
            occ |= bb
        return occ

    def occupied_count(self) -> int:
        return sum(bb.bit_count() for bb in self._occupancy)

    def king_square(self, color: Color) -> Square:
        """The square of *color*'s single king.

        A board without exactly one king of *color* is corrupted state.
        """
        kings = self.pieces_bitboard(color, PieceType.KING)
        assert kings and kings & (kings - 1) == 0, f"{color} must have one king"
        return kings.bit_length() - 1

    def items(self) -> Iterator[tuple[Square, Piece]]:
        """Occupied squares with their pieces, a1 first."""
        for sq, piece in enumerate(self._squares):
            if piece is not None:
                yield sq, piece

    # -- Copying / factories ----------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        b._occupancy = self._occupancy.copy()
        return b

    @classmethod
    def initial(cls) -> Board:
        """Standard starting array."""
        b = cls()
        for f, pt in enumerate(_BACK_RANK):
            b[make_square(f, 0)] = Piece(Color.WHITE, pt)
            b[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            b[make_square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            cells = (self[make_square(file, rank)] for file in range(8))
            rows.append(f"{rank + 1} " + " ".join(str(p) if p else "." for p in cells))
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
