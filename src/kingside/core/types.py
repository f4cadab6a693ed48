"""Squares and their names.

A square is an ``int`` in 0–63, counted rank by rank from White's side:
a1 is 0, h1 is 7, a2 is 8 and h8 is 63.
"""

from __future__ import annotations

from typing import TypeAlias

from kingside.core.errors import InvalidSquareError

Square: TypeAlias = int

FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


def file_of(sq: Square) -> int:
    return sq & 7


def rank_of(sq: Square) -> int:
    return sq >> 3


def make_square(file: int, rank: int) -> Square:
    return (rank << 3) | file


def is_valid_square(sq: int) -> bool:
    return 0 <= sq < 64


def square_name(sq: Square) -> str:
    """``28`` → ``"e4"``."""
    return FILE_NAMES[file_of(sq)] + RANK_NAMES[rank_of(sq)]


def parse_square(name: str) -> Square:
    """``"e4"`` → ``28``.

    Raises:
        InvalidSquareError: *name* is not a file letter followed by a rank digit.
    """
    if not isinstance(name, str) or len(name) != 2:
        raise InvalidSquareError(f"Invalid square name: {name!r}")
    file, rank = FILE_NAMES.find(name[0]), RANK_NAMES.find(name[1])
    if file < 0 or rank < 0:
        raise InvalidSquareError(f"Invalid square name: {name!r}")
    return make_square(file, rank)


def to_square(value: Square | str) -> Square:
    """Square index from an index or a name, as accepted by the session API."""
    if isinstance(value, str):
        return parse_square(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSquareError(f"Invalid square: {value!r}")
    if not is_valid_square(value):
        raise InvalidSquareError(f"Square index out of range: {value}")
    return value


# -- Named squares --

A1, B1, C1, D1, E1, F1, G1, H1 = range(0, 8)
A2, B2, C2, D2, E2, F2, G2, H2 = range(8, 16)
A3, B3, C3, D3, E3, F3, G3, H3 = range(16, 24)
A4, B4, C4, D4, E4, F4, G4, H4 = range(24, 32)
A5, B5, C5, D5, E5, F5, G5, H5 = range(32, 40)
A6, B6, C6, D6, E6, F6, G6, H6 = range(40, 48)
A7, B7, C7, D7, E7, F7, G7, H7 = range(48, 56)
A8, B8, C8, D8, E8, F8, G8, H8 = range(56, 64)
