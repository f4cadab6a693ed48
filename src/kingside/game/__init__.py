"""Game management layer — session, players, clock, state machine.

Quick start::

    from kingside.game import GameSession, GameSettings

    session = GameSession()
    session.initialize_game(GameSettings.blitz_5m(), "Alice", "Bob")
    session.submit_move("e2", "e4")
"""

from kingside.game.clock import Clock, TimerState, format_time
from kingside.game.interfaces import GamePhase, IClock, IPlayer
from kingside.game.player import ComputerPlayer, HumanPlayer, PlayerStatus, RemotePlayer
from kingside.game.result import EndReason, GameResult, Outcome
from kingside.game.session import GameEvents, GameSession, PendingPromotion
from kingside.game.settings import GameMode, GameSettings
from kingside.game.state import CapturedPieces, GameSnapshot, GameState, GameStats, MoveRecord

__all__ = [
    # Interfaces
    "GamePhase",
    "IClock",
    "IPlayer",
    # Concrete
    "CapturedPieces",
    "Clock",
    "ComputerPlayer",
    "EndReason",
    "GameEvents",
    "GameMode",
    "GameResult",
    "GameSession",
    "GameSettings",
    "GameSnapshot",
    "GameState",
    "GameStats",
    "HumanPlayer",
    "MoveRecord",
    "Outcome",
    "PendingPromotion",
    "PlayerStatus",
    "RemotePlayer",
    "TimerState",
    "format_time",
]
