"""Colours, piece kinds, move kinds and castling rights."""

from __future__ import annotations

from enum import IntEnum, IntFlag


class Color(IntEnum):
    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def sign(self) -> int:
        """+1 for White, -1 for Black; turns a White-relative score around."""
        return 1 if self is Color.WHITE else -1

    @property
    def back_rank(self) -> int:
        """Rank index (0–7) the pieces of this colour start on."""
        return 0 if self is Color.WHITE else 7

    @property
    def fen_char(self) -> str:
        return "w" if self is Color.WHITE else "b"

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Piece kinds, cheapest first."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    def __str__(self) -> str:
        return self.name.lower()


# Order offered to a promoting player and produced by the generator.
PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


class MoveFlag(IntEnum):
    NORMAL = 0
    DOUBLE_PAWN = 1
    EN_PASSANT = 2
    CASTLE_KINGSIDE = 3
    CASTLE_QUEENSIDE = 4
    PROMOTION = 5

    @property
    def is_castle(self) -> bool:
        return self in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)


class CastlingRights(IntFlag):
    """Castling availability; one bit per colour and wing."""

    NONE = 0
    WHITE_KINGSIDE = 1
    WHITE_QUEENSIDE = 2
    BLACK_KINGSIDE = 4
    BLACK_QUEENSIDE = 8

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH

    @classmethod
    def kingside(cls, color: Color) -> CastlingRights:
        return cls.WHITE_KINGSIDE if color is Color.WHITE else cls.BLACK_KINGSIDE

    @classmethod
    def queenside(cls, color: Color) -> CastlingRights:
        return cls.WHITE_QUEENSIDE if color is Color.WHITE else cls.BLACK_QUEENSIDE

    @classmethod
    def both(cls, color: Color) -> CastlingRights:
        return cls.kingside(color) | cls.queenside(color)
