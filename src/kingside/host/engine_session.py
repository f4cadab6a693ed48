"""Engine search session: runs computer turns on a worker thread."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PyQt6.QtCore import QObject, Qt, QThread, pyqtSignal

from kingside.core.errors import ChessError
from kingside.core.move import Move
from kingside.engine.qt_bridge import EngineWorker
from kingside.game.interfaces import GamePhase
from kingside.game.player import ComputerPlayer
from kingside.game.session import GameSession

if TYPE_CHECKING:
    from kingside.core.position import Position

_LOGGER = logging.getLogger(__name__)


class _EngineCommandBus(QObject):
    """Signal bridge for issuing worker commands across threads."""

    search_requested = pyqtSignal(object, int, str)
    cancel_requested = pyqtSignal()
    time_limit_requested = pyqtSignal(int)


class EngineSession:
    """Owns the worker-thread search lifecycle and hands moves to the session.

    Once :meth:`setup` has run, every computer turn of *session* is routed
    here: the session's request id travels with the search and comes back
    with the answer, so replies to abandoned searches are dropped by
    :meth:`GameSession.complete_computer_search`.
    """

    _MAX_FAILURE_RETRIES = 1

    __slots__ = (
        "__weakref__",
        "_session",
        "_command_bus",
        "_engine_thread",
        "_engine_worker",
        "_pending_request",
        "_remaining_failure_retries",
        "_is_shutting_down",
        "_is_started",
    )

    def __init__(
        self,
        session: GameSession,
        *,
        parent: QObject | None = None,
        time_limit_ms: int | None = None,
    ) -> None:
        self._session = session
        self._command_bus = _EngineCommandBus(parent)
        self._engine_thread = QThread(parent)
        self._engine_worker = EngineWorker(time_limit_ms=time_limit_ms)
        self._pending_request: int | None = None
        self._remaining_failure_retries = self._MAX_FAILURE_RETRIES
        self._is_shutting_down = False
        self._is_started = False

    @property
    def is_started(self) -> bool:
        return self._is_started

    @property
    def pending_request(self) -> int | None:
        return self._pending_request

    def setup(self) -> None:
        """Start the worker thread and take over the session's computer turns."""
        if self._is_started:
            return
        self._is_shutting_down = False
        worker = self._engine_worker
        worker.moveToThread(self._engine_thread)
        self._command_bus.search_requested.connect(worker.request_move)
        # The cancel flag is a threading.Event; set it without waiting for
        # the worker's event loop, which is blocked while it searches.
        self._command_bus.cancel_requested.connect(
            worker.cancel, Qt.ConnectionType.DirectConnection
        )
        self._command_bus.time_limit_requested.connect(worker.set_time_limit)
        worker.best_move_ready.connect(self._on_engine_best_move)
        worker.search_cancelled.connect(self._on_engine_cancelled)
        worker.search_no_move.connect(self._on_engine_no_move)
        worker.search_error.connect(self._on_engine_error)
        self._engine_thread.start()
        self._is_started = True
        self._session.bind_computer(self.request_move, self.cancel_search)
        _LOGGER.debug("Engine session started")

        # A computer game may already be waiting for its first move.
        session = self._session
        if (
            session.phase == GamePhase.ACTIVE
            and isinstance(session.current_player, ComputerPlayer)
            and not session.is_search_in_flight
        ):
            self.request_move(session.state.position)

    def shutdown(self) -> None:
        """Stop any search and shut down the worker thread."""
        if not self._is_started:
            return
        self._is_shutting_down = True
        self._session.bind_computer(None, None)
        self._session.cancel_computer_search()
        self._command_bus.cancel_requested.emit()
        self._engine_thread.quit()
        self._engine_thread.wait(2000)
        self._pending_request = None
        self._is_started = False
        _LOGGER.debug("Engine session stopped")

    def set_time_limit(self, time_limit_ms: int | None) -> None:
        """Cap later searches at *time_limit_ms* (``None`` for no cap)."""
        value = time_limit_ms or 0
        if self._is_started:
            self._command_bus.time_limit_requested.emit(value)
            return
        self._engine_worker.set_time_limit(value)

    def request_move(self, position: Position) -> None:
        """Start a search for the computer to move in *position*."""
        del position  # the session hands out its own copy below
        if not self._is_started or self._is_shutting_down:
            return
        player = self._session.current_player
        if not isinstance(player, ComputerPlayer):
            return
        request_id, snapshot = self._session.begin_computer_search()
        self._pending_request = request_id
        _LOGGER.debug("Requesting %s search %d", player.difficulty.value, request_id)
        self._command_bus.search_requested.emit(snapshot, request_id, player.difficulty.value)

    def cancel_search(self) -> None:
        """Abort the search in flight; its answer will be ignored."""
        self._pending_request = None
        if self._is_started:
            self._command_bus.cancel_requested.emit()

    # ── Worker callbacks ─────────────────────────────────────────────────

    def _on_engine_best_move(
        self,
        request_id: int,
        move_obj: object,
        score: int,
        depth: int,
        nodes: int,
    ) -> None:
        if self._is_shutting_down or request_id != self._pending_request:
            return
        if not isinstance(move_obj, Move):
            self._handle_engine_failure(request_id, "Engine returned a non-move")
            return
        self._pending_request = None
        self._remaining_failure_retries = self._MAX_FAILURE_RETRIES
        _LOGGER.debug(
            "Search %d: %s (score %d, depth %d, %d nodes)",
            request_id,
            move_obj,
            score,
            depth,
            nodes,
        )
        try:
            self._session.complete_computer_search(request_id, move_obj)
        except ChessError as exc:
            _LOGGER.warning("Engine move rejected: %s", exc)
            self._resign_computer(str(exc))

    def _on_engine_cancelled(self, request_id: int) -> None:
        if self._is_shutting_down or request_id != self._pending_request:
            return
        self._pending_request = None
        self._session.complete_computer_search(request_id, None)

    def _on_engine_no_move(self, request_id: int, _score: int, _depth: int, _nodes: int) -> None:
        self._handle_engine_failure(request_id, "Engine produced no move")

    def _on_engine_error(self, request_id: int, message: str) -> None:
        self._handle_engine_failure(request_id, message)

    def _handle_engine_failure(self, request_id: int, message: str) -> None:
        if self._is_shutting_down or request_id != self._pending_request:
            return
        self._pending_request = None
        session = self._session
        session.complete_computer_search(request_id, None)
        if session.phase != GamePhase.ACTIVE:
            return

        if self._remaining_failure_retries > 0:
            self._remaining_failure_retries -= 1
            _LOGGER.warning("Search %d failed (%s); retrying", request_id, message)
            self.request_move(session.state.position)
            return

        self._resign_computer(message)

    def _resign_computer(self, message: str) -> None:
        session = self._session
        self._remaining_failure_retries = self._MAX_FAILURE_RETRIES
        if session.phase not in (GamePhase.ACTIVE, GamePhase.PAUSED):
            return
        player = session.current_player
        if not isinstance(player, ComputerPlayer):
            return
        _LOGGER.warning("Engine failed (%s); %s resigns", message, player.color)
        session.resign(player.color)
