"""Qt bridge to run engine search in a worker thread."""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from kingside.core.position import Position
from kingside.engine.minimax import MinimaxEngine
from kingside.engine.search import Difficulty, SearchLimits

_LOGGER = logging.getLogger(__name__)


class EngineWorker(QObject):
    """Thread-affine worker that computes computer moves on demand.

    Every result signal carries the request id it answers so the receiver
    can drop answers to requests it no longer waits for.
    """

    best_move_ready = pyqtSignal(int, object, int, int, int)
    search_cancelled = pyqtSignal(int)
    search_no_move = pyqtSignal(int, int, int, int)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_cancel_event", "_engine", "_time_limit_ms")

    def __init__(self, *, time_limit_ms: int | None = None) -> None:
        super().__init__()
        self._engine = MinimaxEngine()
        self._time_limit_ms = time_limit_ms
        self._cancel_event = threading.Event()

    @pyqtSlot(object, int, str)
    def request_move(self, position_obj: object, request_id: int, difficulty: str) -> None:
        """Search for a move in *position_obj* and emit the result."""
        if not isinstance(position_obj, Position):
            self.search_error.emit(request_id, "Engine received invalid position")
            return

        self._cancel_event.clear()
        try:
            level = Difficulty(difficulty)
            if level.depth is None:
                move = self._engine.select_move(position_obj, level)
                score, depth, nodes = 0, 0, 0
            else:
                limits = SearchLimits(max_depth=level.depth, time_limit_ms=self._time_limit_ms)
                result = self._engine.search(
                    position_obj,
                    limits,
                    is_cancelled=self._cancel_event.is_set,
                )
                move, score, depth, nodes = (
                    result.best_move,
                    result.score,
                    result.depth,
                    result.nodes,
                )
        except Exception as exc:
            _LOGGER.warning("Engine search %d failed: %s", request_id, exc)
            self.search_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return

        if move is None:
            self.search_no_move.emit(request_id, score, depth, nodes)
            return

        self.best_move_ready.emit(request_id, move, score, depth, nodes)

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current search."""
        self._cancel_event.set()

    @pyqtSlot(int)
    def set_time_limit(self, time_limit_ms: int) -> None:
        """Cap later searches at *time_limit_ms*; ``0`` removes the cap."""
        self._time_limit_ms = time_limit_ms or None
