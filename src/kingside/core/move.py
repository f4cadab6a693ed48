"""Move value object (UCI-style representation)."""

from __future__ import annotations

from dataclasses import dataclass

from kingside.core.enums import MoveFlag, PieceType
from kingside.core.piece import piece_type_char
from kingside.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    Moves are produced by :class:`~kingside.core.move_generator.MoveGenerator`
    for a specific position and carry no meaning detached from it.
    """

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    # ── Classification ───────────────────────────────────────────────────

    @property
    def is_castle(self) -> bool:
        return self.flag.is_castle

    @property
    def is_en_passant(self) -> bool:
        return self.flag == MoveFlag.EN_PASSANT

    @property
    def is_promotion(self) -> bool:
        return self.flag == MoveFlag.PROMOTION

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += piece_type_char(self.promotion)
        return base
