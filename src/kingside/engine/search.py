"""Shared engine search models and protocol."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from kingside.core.move import Move
    from kingside.core.position import Position

CancelCheck = Callable[[], bool]


class Difficulty(str, Enum):
    """Computer opponent strength."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def depth(self) -> int | None:
        """Fixed minimax depth, ``None`` for random play."""
        return _DEPTHS[self]


_DEPTHS: dict[Difficulty, int | None] = {
    Difficulty.EASY: None,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 3,
}


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single move computation."""

    max_depth: int = 3
    time_limit_ms: int | None = None

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")
        if self.time_limit_ms is not None and self.time_limit_ms <= 0:
            raise ValueError(f"time_limit_ms must be > 0, got {self.time_limit_ms}")

    @classmethod
    def for_difficulty(cls, difficulty: Difficulty) -> SearchLimits:
        return cls(max_depth=difficulty.depth or 1)


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search.

    ``score`` is White-relative; ``depth`` is the last fully completed depth.
    """

    best_move: Move | None
    score: int
    depth: int
    nodes: int


class ISearchEngine(Protocol):
    """Protocol for engines used by the game and host layers."""

    def select_move(self, position: Position, difficulty: Difficulty) -> Move | None: ...

    def search(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult: ...
