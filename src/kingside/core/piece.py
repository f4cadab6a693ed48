"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from kingside.core.enums import Color, PieceType
from kingside.core.errors import InvalidPositionEncodingError

_TYPE_CHARS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}

# FEN character ↔ (Color, PieceType)
_CHAR_MAP: dict[str, tuple[Color, PieceType]] = {}
for _ptype, _ch in _TYPE_CHARS.items():
    _CHAR_MAP[_ch.upper()] = (Color.WHITE, _ptype)
    _CHAR_MAP[_ch] = (Color.BLACK, _ptype)

_FEN_CHARS: dict[tuple[Color, PieceType], str] = {v: k for k, v in _CHAR_MAP.items()}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece."""

    color: Color
    piece_type: PieceType

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        return _FEN_CHARS[(self.color, self.piece_type)]

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        try:
            color, ptype = _CHAR_MAP[char]
        except KeyError:
            raise InvalidPositionEncodingError(
                f"Invalid piece character: {char!r}"
            ) from None
        return cls(color, ptype)


def piece_type_char(piece_type: PieceType) -> str:
    """Lower-case letter for *piece_type*, e.g. knight → 'n'."""
    return _TYPE_CHARS[piece_type]
