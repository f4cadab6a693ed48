"""Game settings and time-control presets."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Final

from kingside.core.enums import Color
from kingside.core.errors import InvalidSettingsError
from kingside.engine.search import Difficulty

MAX_TIME_PER_PLAYER: Final = 24 * 60 * 60
MAX_INCREMENT: Final = 60


class GameMode(str, Enum):
    LOCAL = "local"
    COMPUTER = "computer"
    ONLINE = "online"


@dataclass(frozen=True, slots=True)
class GameSettings:
    """Immutable, validated settings for one game.

    Args:
        time_per_player: Starting time per side in whole seconds.
        increment: Seconds added after each move (Fischer).
        game_mode: Local hot-seat, against the computer, or online.
        difficulty: Computer strength; required for computer games only.
        board_orientation: Side shown at the bottom; presentation only.
        computer_color: Side the computer plays in computer games.
        local_color: Side the local human plays in online games.
    """

    time_per_player: int = 600
    increment: int = 0
    game_mode: GameMode = GameMode.LOCAL
    difficulty: Difficulty | None = None
    board_orientation: Color = Color.WHITE
    computer_color: Color = Color.BLACK
    local_color: Color = Color.WHITE

    def __post_init__(self) -> None:
        if not _is_int(self.time_per_player) or not (
            0 < self.time_per_player <= MAX_TIME_PER_PLAYER
        ):
            raise InvalidSettingsError(
                f"time_per_player must be 1..{MAX_TIME_PER_PLAYER} seconds, "
                f"got {self.time_per_player!r}"
            )
        if not _is_int(self.increment) or not (0 <= self.increment <= MAX_INCREMENT):
            raise InvalidSettingsError(
                f"increment must be 0..{MAX_INCREMENT} seconds, got {self.increment!r}"
            )
        try:
            object.__setattr__(self, "game_mode", GameMode(self.game_mode))
            if self.difficulty is not None:
                object.__setattr__(self, "difficulty", Difficulty(self.difficulty))
        except ValueError as exc:
            raise InvalidSettingsError(str(exc)) from None
        if self.game_mode == GameMode.COMPUTER and self.difficulty is None:
            raise InvalidSettingsError("A computer game needs a difficulty")
        for name in ("board_orientation", "computer_color", "local_color"):
            if not isinstance(getattr(self, name), Color):
                raise InvalidSettingsError(f"{name} must be a Color, got {getattr(self, name)!r}")

    # ── Presets ──────────────────────────────────────────────────────────

    @classmethod
    def bullet_1m(cls) -> GameSettings:
        return cls(60, 0)

    @classmethod
    def blitz_3m2s(cls) -> GameSettings:
        return cls(180, 2)

    @classmethod
    def blitz_5m(cls) -> GameSettings:
        return cls(300, 0)

    @classmethod
    def rapid_10m(cls) -> GameSettings:
        return cls(600, 0)

    @classmethod
    def rapid_15m10s(cls) -> GameSettings:
        return cls(900, 10)

    @classmethod
    def classical_30m(cls) -> GameSettings:
        return cls(1800, 0)

    def against_computer(
        self, difficulty: Difficulty, computer_color: Color = Color.BLACK
    ) -> GameSettings:
        """Same time control, played against the computer."""
        return replace(
            self,
            game_mode=GameMode.COMPUTER,
            difficulty=difficulty,
            computer_color=computer_color,
            board_orientation=computer_color.opposite,
        )

    def online(self, local_color: Color = Color.WHITE) -> GameSettings:
        """Same time control, played against a remote opponent."""
        return replace(
            self,
            game_mode=GameMode.ONLINE,
            local_color=local_color,
            board_orientation=local_color,
        )

    def __repr__(self) -> str:
        mins = self.time_per_player / 60
        clock = f"{mins:g}m+{self.increment}s" if self.increment else f"{mins:g}m"
        return f"GameSettings({clock}, {self.game_mode.value})"


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
