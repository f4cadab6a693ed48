"""Tests for Qt engine bridge worker."""

from __future__ import annotations

from PyQt6.QtTest import QSignalSpy

from kingside.core.move import Move
from kingside.core.move_generator import MoveGenerator
from kingside.core.notation import STARTING_FEN, move_to_san, position_from_fen
from kingside.core.position import Position
from kingside.engine.qt_bridge import EngineWorker
from kingside.engine.search import CancelCheck, Difficulty, SearchLimits, SearchResult


class _CancellingEngine:
    def __init__(self, worker: EngineWorker) -> None:
        self._worker = worker

    def search(
        self,
        position: Position,
        _limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        del is_cancelled
        legal = MoveGenerator(position).generate_legal_moves()
        self._worker.cancel()
        return SearchResult(best_move=legal[0], score=0, depth=1, nodes=1)


class _NoMoveEngine:
    def search(
        self,
        _position: Position,
        _limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        del is_cancelled
        return SearchResult(best_move=None, score=0, depth=0, nodes=0)


class _FailingEngine:
    def search(
        self,
        _position: Position,
        _limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        raise RuntimeError("boom")


class _RecordingEngine:
    def __init__(self) -> None:
        self.limits: list[SearchLimits] = []
        self.easy_calls = 0

    def select_move(self, position: Position, _difficulty: Difficulty) -> Move | None:
        self.easy_calls += 1
        return MoveGenerator(position).generate_legal_moves()[-1]

    def search(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        assert is_cancelled is not None and not is_cancelled()
        self.limits.append(limits)
        move = MoveGenerator(position).generate_legal_moves()[0]
        return SearchResult(best_move=move, score=15, depth=limits.max_depth, nodes=42)


class TestEngineWorker:
    def test_real_search_emits_best_move(self, qapp: object) -> None:
        position = position_from_fen("6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1")
        worker = EngineWorker()
        best_moves = QSignalSpy(worker.best_move_ready)

        worker.request_move(position, 3, Difficulty.MEDIUM.value)

        assert len(best_moves) == 1
        request_id, move, score, depth, _nodes = best_moves[0]
        assert request_id == 3
        assert move_to_san(position, move) == "Ra8#"
        assert score > 0
        assert depth == 2

    def test_difficulty_sets_depth_and_time_limit(self, qapp: object) -> None:
        worker = EngineWorker(time_limit_ms=500)
        engine = _RecordingEngine()
        worker._engine = engine

        worker.request_move(position_from_fen(STARTING_FEN), 1, "hard")
        worker.set_time_limit(0)
        worker.request_move(position_from_fen(STARTING_FEN), 2, "medium")

        assert engine.limits == [
            SearchLimits(max_depth=3, time_limit_ms=500),
            SearchLimits(max_depth=2, time_limit_ms=None),
        ]

    def test_easy_uses_random_selection(self, qapp: object) -> None:
        worker = EngineWorker()
        engine = _RecordingEngine()
        worker._engine = engine
        best_moves = QSignalSpy(worker.best_move_ready)

        worker.request_move(position_from_fen(STARTING_FEN), 5, "easy")

        assert engine.easy_calls == 1
        assert engine.limits == []
        assert len(best_moves) == 1
        assert best_moves[0][0] == 5

    def test_emits_cancelled_when_search_is_cancelled(self, qapp: object) -> None:
        worker = EngineWorker()
        worker._engine = _CancellingEngine(worker)
        cancelled = QSignalSpy(worker.search_cancelled)
        best_moves = QSignalSpy(worker.best_move_ready)

        worker.request_move(position_from_fen(STARTING_FEN), 7, "medium")

        assert len(cancelled) == 1
        assert cancelled[0][0] == 7
        assert len(best_moves) == 0

    def test_cancel_flag_cleared_for_next_request(self, qapp: object) -> None:
        worker = EngineWorker()
        worker.cancel()
        worker._engine = _RecordingEngine()
        best_moves = QSignalSpy(worker.best_move_ready)

        worker.request_move(position_from_fen(STARTING_FEN), 8, "medium")

        assert len(best_moves) == 1

    def test_emits_no_move_when_search_returns_none(self, qapp: object) -> None:
        worker = EngineWorker()
        worker._engine = _NoMoveEngine()
        no_move = QSignalSpy(worker.search_no_move)
        best_moves = QSignalSpy(worker.best_move_ready)
        errors = QSignalSpy(worker.search_error)

        worker.request_move(position_from_fen(STARTING_FEN), 11, "medium")

        assert len(no_move) == 1
        assert no_move[0][0] == 11
        assert len(best_moves) == 0
        assert len(errors) == 0

    def test_emits_error_when_engine_raises(self, qapp: object) -> None:
        worker = EngineWorker()
        worker._engine = _FailingEngine()
        errors = QSignalSpy(worker.search_error)

        worker.request_move(position_from_fen(STARTING_FEN), 12, "hard")

        assert len(errors) == 1
        assert errors[0][0] == 12
        assert "boom" in errors[0][1]

    def test_rejects_non_position(self, qapp: object) -> None:
        worker = EngineWorker()
        errors = QSignalSpy(worker.search_error)

        worker.request_move("not a position", 13, "medium")

        assert len(errors) == 1
        assert errors[0][0] == 13

    def test_unknown_difficulty_is_an_error(self, qapp: object) -> None:
        worker = EngineWorker()
        errors = QSignalSpy(worker.search_error)

        worker.request_move(position_from_fen(STARTING_FEN), 14, "grandmaster")

        assert len(errors) == 1
