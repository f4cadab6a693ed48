"""Abstract interfaces for the game layer.

:class:`~kingside.game.session.GameSession` depends on these ABCs, not on
concrete Player/Clock implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from kingside.core.enums import Color

if TYPE_CHECKING:
    from kingside.core.position import Position
    from kingside.game.clock import TimerState


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a game session."""

    IDLE = auto()
    ACTIVE = auto()
    PAUSED = auto()
    ENDED = auto()


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IPlayer(ABC):
    """Interface for a game participant (local human, computer or remote)."""

    @property
    @abstractmethod
    def player_id(self) -> str: ...

    @property
    @abstractmethod
    def color(self) -> Color: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def is_human(self) -> bool: ...

    @abstractmethod
    def request_move(self, position: Position) -> None:
        """Begin the move-selection process.

        For humans this is a no-op (moves arrive through ``submit_move``).
        For the computer this kicks off a search.
        """

    @abstractmethod
    def cancel(self) -> None:
        """Cancel an ongoing move computation (computer only)."""


class IClock(ABC):
    """Interface for a whole-second chess clock."""

    @abstractmethod
    def start(self, color: Color) -> None:
        """Start the clock for *color*."""

    @abstractmethod
    def stop(self) -> None:
        """Pause the running clock."""

    @abstractmethod
    def switch_active(self, color: Color) -> None:
        """Make *color* the side whose time runs."""

    @abstractmethod
    def tick(self, elapsed_seconds: int) -> None:
        """Deduct *elapsed_seconds* from the active side."""

    @abstractmethod
    def remaining(self, color: Color) -> int:
        """Seconds remaining for *color*."""

    @abstractmethod
    def add_increment(self, color: Color) -> None:
        """Add the per-move increment after *color* moved."""

    @abstractmethod
    def snapshot(self) -> TimerState:
        """Immutable view of both countdowns."""
