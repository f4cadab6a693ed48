"""Whole-second chess clock with Fischer increment support."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from kingside.core.enums import Color
from kingside.game.interfaces import IClock

_LOGGER = logging.getLogger(__name__)

LOW_TIME_THRESHOLD = 30


@dataclass(frozen=True, slots=True)
class TimerState:
    """Read-only view of both countdowns."""

    white_time: int
    black_time: int
    is_running: bool
    active_color: Color | None

    def remaining(self, color: Color) -> int:
        return self.white_time if color == Color.WHITE else self.black_time


class Clock(IClock):
    """Dual countdown driven by explicit :meth:`tick` calls.

    The clock never reads wall time itself; a host (``ClockDriver`` or a
    test) feeds elapsed seconds.  Remaining time only grows through
    :meth:`add_increment`, and ``on_expired`` fires at most once until the
    clock is :meth:`reset`.
    """

    __slots__ = (
        "_initial",
        "_increment",
        "_remaining",
        "_active_color",
        "_running",
        "_expired",
        "on_expired",
    )

    def __init__(
        self,
        time_per_player: int,
        increment: int = 0,
        on_expired: Callable[[Color], None] | None = None,
    ) -> None:
        self._initial = time_per_player
        self._increment = increment
        self._remaining: dict[Color, int] = {}
        self._active_color: Color | None = None
        self._running = False
        self._expired = False
        self.on_expired = on_expired
        self.reset()

    # ── IClock implementation ────────────────────────────────────────────

    def start(self, color: Color) -> None:
        if self._expired:
            return
        self._active_color = color
        self._running = True

    def stop(self) -> None:
        self._running = False

    def switch_active(self, color: Color) -> None:
        self._active_color = color

    def tick(self, elapsed_seconds: int) -> None:
        if elapsed_seconds < 0:
            raise ValueError(f"elapsed_seconds must be >= 0, got {elapsed_seconds}")
        color = self._active_color
        if not self._running or color is None or self._expired:
            return
        left = max(0, self._remaining[color] - elapsed_seconds)
        self._remaining[color] = left
        if left == 0:
            self._expired = True
            self._running = False
            _LOGGER.info("Flag fell for %s", color)
            if self.on_expired is not None:
                self.on_expired(color)

    def remaining(self, color: Color) -> int:
        return self._remaining[color]

    def add_increment(self, color: Color) -> None:
        if self._increment and not self._expired:
            self._remaining[color] += self._increment

    def snapshot(self) -> TimerState:
        return TimerState(
            white_time=self._remaining[Color.WHITE],
            black_time=self._remaining[Color.BLACK],
            is_running=self._running,
            active_color=self._active_color,
        )

    # ── Extra helpers ────────────────────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def active_color(self) -> Color | None:
        return self._active_color

    @property
    def increment(self) -> int:
        return self._increment

    @property
    def has_expired(self) -> bool:
        return self._expired

    def is_low_time(self, color: Color, threshold: int = LOW_TIME_THRESHOLD) -> bool:
        """Whether *color* is down to *threshold* seconds or less."""
        return self._remaining[color] <= threshold

    def reset(self) -> None:
        """Refill both sides and stop."""
        self._remaining = {Color.WHITE: self._initial, Color.BLACK: self._initial}
        self._active_color = None
        self._running = False
        self._expired = False


def format_time(seconds: int) -> str:
    """``m:ss`` below an hour, ``h:mm:ss`` from an hour on."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
