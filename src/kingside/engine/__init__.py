"""Engine package: minimax search, evaluation and the Qt worker bridge."""

from kingside.engine.evaluator import MATE_SCORE, PIECE_VALUES, evaluate
from kingside.engine.minimax import MinimaxEngine
from kingside.engine.search import (
    CancelCheck,
    Difficulty,
    ISearchEngine,
    SearchLimits,
    SearchResult,
)

__all__ = [
    "CancelCheck",
    "Difficulty",
    "ISearchEngine",
    "MATE_SCORE",
    "MinimaxEngine",
    "PIECE_VALUES",
    "SearchLimits",
    "SearchResult",
    "evaluate",
]
