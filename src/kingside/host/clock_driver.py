"""ClockDriver — feeds wall-clock seconds into a GameSession."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from kingside.game.interfaces import GamePhase
from kingside.game.session import GameSession

_LOGGER = logging.getLogger(__name__)


class ClockDriver(QObject):
    """Ticks the session once per interval while the game is ACTIVE.

    The driver follows ``on_phase_changed``: it starts on ACTIVE and stops on
    PAUSED or ENDED.  ``stopped`` is emitted once per running stretch, so a
    game end observed both by the phase event and by a late timer shot still
    reports a single stop.
    """

    ticked = pyqtSignal(int, int)
    stopped = pyqtSignal()

    def __init__(
        self,
        session: GameSession,
        parent: QObject | None = None,
        *,
        interval_ms: int = 1000,
    ) -> None:
        super().__init__(parent)
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {interval_ms}")
        self._session = session
        self._interval_ms = interval_ms
        self._elapsed_ms = 0
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._tick)
        session.events.on_phase_changed.append(self._on_phase_changed)
        if session.phase == GamePhase.ACTIVE:
            self.start()

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        if self._timer.isActive():
            return
        self._elapsed_ms = 0
        self._timer.start()
        _LOGGER.debug("Clock driver started")

    def stop(self) -> None:
        if not self._timer.isActive():
            return
        self._timer.stop()
        _LOGGER.debug("Clock driver stopped")
        self.stopped.emit()

    def detach(self) -> None:
        """Stop and unsubscribe from the session."""
        self.stop()
        try:
            self._session.events.on_phase_changed.remove(self._on_phase_changed)
        except ValueError:
            pass

    def _on_phase_changed(self, phase: GamePhase) -> None:
        if phase == GamePhase.ACTIVE:
            self.start()
        else:
            self.stop()

    def _tick(self) -> None:
        session = self._session
        if session.phase != GamePhase.ACTIVE:
            self.stop()
            return
        # Whole seconds only; the remainder carries over to the next shot.
        seconds, self._elapsed_ms = divmod(self._elapsed_ms + self._interval_ms, 1000)
        if seconds:
            session.tick(seconds)
        clock = session.clock
        if clock is not None:
            timer = clock.snapshot()
            self.ticked.emit(timer.white_time, timer.black_time)
