"""Terminal game results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kingside.core.enums import Color


class Outcome(str, Enum):
    """Result from White's point of view."""

    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


class EndReason(str, Enum):
    CHECKMATE = "checkmate"
    RESIGNATION = "resignation"
    TIMEOUT = "timeout"
    STALEMATE = "stalemate"
    DRAW = "draw"
    ABANDONMENT = "abandonment"


_DECISIVE = frozenset(
    {EndReason.CHECKMATE, EndReason.RESIGNATION, EndReason.TIMEOUT, EndReason.ABANDONMENT}
)


@dataclass(frozen=True, slots=True)
class GameResult:
    """How a game ended.

    ``outcome`` is relative to White: a White win is ``Outcome.WIN``, a Black
    win ``Outcome.LOSS``.  ``winner`` is ``None`` exactly when the game is
    drawn.
    """

    outcome: Outcome
    reason: EndReason
    winner: Color | None = None

    def __post_init__(self) -> None:
        if self.outcome == Outcome.DRAW:
            if self.winner is not None:
                raise ValueError("A drawn result has no winner")
            if self.reason in _DECISIVE:
                raise ValueError(f"{self.reason.value} cannot end in a draw")
            return
        expected = Color.WHITE if self.outcome == Outcome.WIN else Color.BLACK
        if self.winner != expected:
            raise ValueError(f"Outcome {self.outcome.value} implies winner {expected}")
        if self.reason not in _DECISIVE:
            raise ValueError(f"{self.reason.value} cannot produce a winner")

    @classmethod
    def win_for(cls, winner: Color, reason: EndReason) -> GameResult:
        outcome = Outcome.WIN if winner == Color.WHITE else Outcome.LOSS
        return cls(outcome, reason, winner)

    @classmethod
    def draw(cls, reason: EndReason = EndReason.DRAW) -> GameResult:
        return cls(Outcome.DRAW, reason, None)

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    @property
    def loser(self) -> Color | None:
        return None if self.winner is None else self.winner.opposite

    def __str__(self) -> str:
        if self.winner is None:
            return f"draw ({self.reason.value})"
        return f"{self.winner} wins ({self.reason.value})"
