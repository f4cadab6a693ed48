"""Fixed-depth minimax with alpha-beta pruning over make/unmake."""

from __future__ import annotations

import logging
import random
from time import perf_counter, sleep

from kingside.core.enums import Color
from kingside.core.move import Move
from kingside.core.move_generator import MoveGenerator
from kingside.core.position import Position
from kingside.core.rules import Rules
from kingside.engine.evaluator import evaluate
from kingside.engine.search import (
    CancelCheck,
    Difficulty,
    ISearchEngine,
    SearchLimits,
    SearchResult,
)

_LOGGER = logging.getLogger(__name__)

_INF_SCORE = 1_000_000
_YIELD_EVERY_NODES = 4096


def _never_cancelled() -> bool:
    return False


class _SearchAborted(Exception):
    """Unwinds an iteration that was cancelled or ran out of time."""


class MinimaxEngine(ISearchEngine):
    """White maximises, Black minimises the White-relative evaluation.

    A move only replaces the current best when it is strictly better, so among
    equally scored moves the first one in generation order wins.  Alpha-beta
    bounds never change that choice, which keeps the result identical to
    plain minimax at the same depth.
    """

    __slots__ = ("_rng", "_nodes", "_last_yield_nodes", "_deadline", "_cancel_check")

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._nodes = 0
        self._last_yield_nodes = 0
        self._deadline: float | None = None
        self._cancel_check: CancelCheck = _never_cancelled

    # ── Public API ───────────────────────────────────────────────────────

    def select_move(self, position: Position, difficulty: Difficulty) -> Move | None:
        """Pick a move for the side to move; ``None`` without legal moves."""
        root = position.copy()
        moves = MoveGenerator(root).generate_legal_moves()
        if not moves:
            return None
        difficulty = Difficulty(difficulty)
        depth = difficulty.depth
        if depth is None:
            return self._rng.choice(moves)

        self._begin(None, None)
        score, move = self._search_root(root, moves, depth)
        _LOGGER.debug(
            "%s search: %s (score %d, depth %d, %d nodes)",
            difficulty.value,
            move,
            score,
            depth,
            self._nodes,
        )
        return move

    def search(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        """Iterative deepening up to ``limits.max_depth``.

        Only fully completed depths count: if the search is cancelled or runs
        out of time mid-iteration, the result of the previous depth stands.
        Before depth 1 completes that is the first legal move with the static
        score, so a position with legal moves always yields one.
        """
        root = position.copy()
        self._begin(limits.time_limit_ms, is_cancelled)
        moves = MoveGenerator(root).generate_legal_moves()
        if not moves:
            return SearchResult(None, evaluate(root, moves), 0, 0)

        best_move = moves[0]
        best_score = evaluate(root, moves)
        completed_depth = 0
        for depth in range(1, limits.max_depth + 1):
            try:
                score, move = self._search_root(root, moves, depth)
            except _SearchAborted:
                _LOGGER.debug("Search stopped during depth %d", depth)
                break
            best_move, best_score, completed_depth = move, score, depth

        return SearchResult(best_move, best_score, completed_depth, self._nodes)

    # ── Internals ────────────────────────────────────────────────────────

    def _begin(self, time_limit_ms: int | None, is_cancelled: CancelCheck | None) -> None:
        self._nodes = 0
        self._last_yield_nodes = 0
        self._cancel_check = is_cancelled or _never_cancelled
        self._deadline = None
        if time_limit_ms is not None:
            self._deadline = perf_counter() + max(time_limit_ms, 1) / 1000.0

    def _search_root(
        self,
        position: Position,
        moves: list[Move],
        depth: int,
    ) -> tuple[int, Move]:
        maximizing = position.side_to_move == Color.WHITE
        alpha, beta = -_INF_SCORE, _INF_SCORE
        best_move = moves[0]
        best_score = -_INF_SCORE if maximizing else _INF_SCORE

        for move in moves:
            position.make_move(move)
            score = self._minimax(position, depth - 1, alpha, beta)
            position.unmake_move(move)

            if maximizing:
                if score > best_score:
                    best_score, best_move = score, move
                alpha = max(alpha, best_score)
            else:
                if score < best_score:
                    best_score, best_move = score, move
                beta = min(beta, best_score)

        return best_score, best_move

    def _minimax(self, position: Position, depth: int, alpha: int, beta: int) -> int:
        self._check_stop()
        self._nodes += 1

        legal = MoveGenerator(position).generate_legal_moves()
        if depth <= 0 or not legal or self._is_rule_draw(position):
            return evaluate(position, legal)

        if position.side_to_move == Color.WHITE:
            best = -_INF_SCORE
            for move in legal:
                position.make_move(move)
                best = max(best, self._minimax(position, depth - 1, alpha, beta))
                position.unmake_move(move)
                alpha = max(alpha, best)
                if alpha >= beta:
                    break
            return best

        best = _INF_SCORE
        for move in legal:
            position.make_move(move)
            best = min(best, self._minimax(position, depth - 1, alpha, beta))
            position.unmake_move(move)
            beta = min(beta, best)
            if alpha >= beta:
                break
        return best

    @staticmethod
    def _is_rule_draw(position: Position) -> bool:
        return Rules.is_fifty_move_rule(position) or Rules.is_insufficient_material(position)

    def _check_stop(self) -> None:
        if self._nodes - self._last_yield_nodes >= _YIELD_EVERY_NODES:
            self._last_yield_nodes = self._nodes
            sleep(0.001)
        if self._cancel_check():
            raise _SearchAborted
        if self._deadline is not None and perf_counter() >= self._deadline:
            raise _SearchAborted
