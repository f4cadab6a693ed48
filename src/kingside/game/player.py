"""Concrete player implementations."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kingside.core.enums import Color
from kingside.engine.search import Difficulty
from kingside.game.interfaces import IPlayer

if TYPE_CHECKING:
    from kingside.core.position import Position


def _new_player_id() -> str:
    return uuid.uuid4().hex[:12]


class _BasePlayer(IPlayer):
    __slots__ = ("_player_id", "_color", "_name")

    def __init__(self, color: Color, name: str, player_id: str | None = None) -> None:
        self._player_id = player_id or _new_player_id()
        self._color = color
        self._name = name

    @property
    def player_id(self) -> str:
        return self._player_id

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, {self._color})"


class HumanPlayer(_BasePlayer):
    """A human at this board — moves arrive through ``submit_move``."""

    __slots__ = ()

    def __init__(self, color: Color, name: str = "", player_id: str | None = None) -> None:
        super().__init__(color, name or f"Player ({color})", player_id)

    @property
    def is_human(self) -> bool:
        return True

    def request_move(self, position: Position) -> None:
        pass

    def cancel(self) -> None:
        pass


class ComputerPlayer(_BasePlayer):
    """The computer opponent.

    The search itself is decoupled: ``request_move`` only invokes the
    ``on_request_move`` hook.  Without hooks the owner drives the turn with
    ``GameSession.request_computer_move``.

    Args:
        color: Side the computer plays.
        difficulty: Strength passed to the engine.
        name: Display name.
        on_request_move: ``(Position) -> None`` — called when the session
            asks the computer to start thinking.
        on_cancel: ``() -> None`` — called to abort a running search.
    """

    __slots__ = ("_difficulty", "_on_request_move", "_on_cancel")

    def __init__(
        self,
        color: Color,
        difficulty: Difficulty = Difficulty.MEDIUM,
        name: str = "Computer",
        on_request_move: Callable[[Position], None] | None = None,
        on_cancel: Callable[[], None] | None = None,
        player_id: str | None = None,
    ) -> None:
        super().__init__(color, name, player_id)
        self._difficulty = Difficulty(difficulty)
        self._on_request_move = on_request_move
        self._on_cancel = on_cancel

    @property
    def is_human(self) -> bool:
        return False

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    def bind(
        self,
        on_request_move: Callable[[Position], None] | None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        """Install (or clear) the search hooks."""
        self._on_request_move = on_request_move
        self._on_cancel = on_cancel

    def request_move(self, position: Position) -> None:
        if self._on_request_move is not None:
            self._on_request_move(position)

    def cancel(self) -> None:
        if self._on_cancel is not None:
            self._on_cancel()


class RemotePlayer(_BasePlayer):
    """A human on the other end of a multiplayer room."""

    __slots__ = ()

    def __init__(self, color: Color, name: str = "Opponent", player_id: str | None = None) -> None:
        super().__init__(color, name, player_id)

    @property
    def is_human(self) -> bool:
        return True

    def request_move(self, position: Position) -> None:
        pass  # the move arrives as a MoveMade message

    def cancel(self) -> None:
        pass


@dataclass(frozen=True, slots=True)
class PlayerStatus:
    """Snapshot of a player with clock and turn information."""

    player_id: str
    name: str
    color: Color
    is_human: bool
    time_remaining: int
    is_active: bool
