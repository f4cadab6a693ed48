"""GameSession — the central orchestrator of a timed chess game.

Coordinates: Players, Clock, GameState, MoveGenerator, the computer search.
Emits events via simple callbacks so hosts / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from kingside.core.enums import PROMOTION_TYPES, Color, PieceType
from kingside.core.errors import (
    ChessError,
    IllegalMoveError,
    InvalidStateTransitionError,
    PendingPromotionError,
)
from kingside.core.move import Move
from kingside.core.move_generator import MoveGenerator
from kingside.core.position import Position
from kingside.core.types import Square, square_name, to_square
from kingside.engine.minimax import MinimaxEngine
from kingside.engine.search import ISearchEngine
from kingside.game.clock import Clock, TimerState
from kingside.game.interfaces import GamePhase, IPlayer
from kingside.game.player import ComputerPlayer, HumanPlayer, PlayerStatus, RemotePlayer
from kingside.game.result import EndReason, GameResult
from kingside.game.settings import GameMode, GameSettings
from kingside.game.state import GameSnapshot, GameState, MoveRecord

_LOGGER = logging.getLogger(__name__)

_PROMOTION_CHARS: dict[str, PieceType] = {
    "q": PieceType.QUEEN,
    "r": PieceType.ROOK,
    "b": PieceType.BISHOP,
    "n": PieceType.KNIGHT,
}


@dataclass(frozen=True, slots=True)
class PendingPromotion:
    """A pawn move to the last rank waiting for its promotion piece."""

    from_sq: Square
    to_sq: Square
    color: Color


# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, GameState], None]
GameOverCallback = Callable[[GameResult], None]
PhaseCallback = Callable[[GamePhase], None]
PromotionCallback = Callable[[PendingPromotion], None]
DrawOfferCallback = Callable[[Color], None]
ComputerRequest = Callable[[Position], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_promotion_pending: list[PromotionCallback] = field(default_factory=list)
    on_draw_offered: list[DrawOfferCallback] = field(default_factory=list)


# ── Session ──────────────────────────────────────────────────────────────────


class GameSession:
    """Owns one game: validates moves, runs the clock, switches turns,
    decides results and notifies listeners.

    Single writer: every method must be called from the same thread.  Work
    on other threads (the engine search, observers) only ever sees copies
    handed out by :meth:`begin_computer_search` and :meth:`snapshot`.
    Every failing call raises a :class:`~kingside.core.errors.ChessError`
    and leaves the session exactly as it was.
    """

    __slots__ = (
        "_settings",
        "_state",
        "_players",
        "_clock",
        "_phase",
        "_result",
        "_pending_promotion",
        "_draw_offer",
        "_search_request",
        "_next_request_id",
        "_engine",
        "_computer_hooks",
        "events",
    )

    def __init__(self, engine: ISearchEngine | None = None) -> None:
        self._settings: GameSettings | None = None
        self._state = GameState()
        self._players: dict[Color, IPlayer] = {}
        self._clock: Clock | None = None
        self._phase = GamePhase.IDLE
        self._result: GameResult | None = None
        self._pending_promotion: PendingPromotion | None = None
        self._draw_offer: Color | None = None
        self._search_request: int | None = None
        self._next_request_id = 0
        self._engine = engine
        self._computer_hooks: tuple[ComputerRequest | None, Callable[[], None] | None] = (
            None,
            None,
        )
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def phase(self) -> GamePhase:
        return GamePhase.ENDED if self._result is not None else self._phase

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def settings(self) -> GameSettings | None:
        return self._settings

    @property
    def clock(self) -> Clock | None:
        return self._clock

    @property
    def result(self) -> GameResult | None:
        return self._result

    @property
    def pending_promotion(self) -> PendingPromotion | None:
        return self._pending_promotion

    @property
    def draw_offer(self) -> Color | None:
        """Colour with an open draw offer (online games only)."""
        return self._draw_offer

    @property
    def is_search_in_flight(self) -> bool:
        return self._search_request is not None

    @property
    def current_player(self) -> IPlayer | None:
        return self._players.get(self._state.side_to_move)

    def player(self, color: Color) -> IPlayer | None:
        return self._players.get(color)

    def player_status(self, color: Color) -> PlayerStatus:
        player = self._players.get(color)
        if player is None:
            raise InvalidStateTransitionError("No game has been initialized")
        return PlayerStatus(
            player_id=player.player_id,
            name=player.name,
            color=color,
            is_human=player.is_human,
            time_remaining=self._clock.remaining(color) if self._clock else 0,
            is_active=self.phase == GamePhase.ACTIVE and self._state.side_to_move == color,
        )

    # ── Lifecycle ────────────────────────────────────────────────────────

    def initialize_game(
        self,
        settings: GameSettings,
        white_name: str = "White",
        black_name: str = "Black",
    ) -> None:
        """Start a new game from the standard array (IDLE | ENDED → ACTIVE)."""
        if self.phase in (GamePhase.ACTIVE, GamePhase.PAUSED):
            raise InvalidStateTransitionError(
                f"Cannot start a new game while one is {self.phase.name.lower()}"
            )
        self._start(settings, {Color.WHITE: white_name, Color.BLACK: black_name})

    def reset_game(self) -> None:
        """Restart with the last settings and player names (any phase but IDLE)."""
        if self._settings is None:
            raise InvalidStateTransitionError("No game to reset")
        self.cancel_computer_search()
        names = {color: player.name for color, player in self._players.items()}
        self._start(self._settings, names)

    def _start(self, settings: GameSettings, names: dict[Color, str]) -> None:
        self._settings = settings
        self._players = self._build_players(settings, names)
        self._clock = Clock(
            settings.time_per_player,
            settings.increment,
            on_expired=self.on_clock_expired,
        )
        self._state = GameState()
        self._result = None
        self._pending_promotion = None
        self._draw_offer = None
        self._search_request = None

        _LOGGER.info(
            "New %s game: %s vs %s (%s)",
            settings.game_mode.value,
            self._players[Color.WHITE].name,
            self._players[Color.BLACK].name,
            settings,
        )
        self._clock.start(Color.WHITE)
        self._set_phase(GamePhase.ACTIVE)
        self._prompt_current_player()

    def bind_computer(
        self,
        on_request_move: ComputerRequest | None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        """Route computer turns of this and later games to a search host."""
        self._computer_hooks = (on_request_move, on_cancel)
        for player in self._players.values():
            if isinstance(player, ComputerPlayer):
                player.bind(on_request_move, on_cancel)

    def _build_players(
        self, settings: GameSettings, names: dict[Color, str]
    ) -> dict[Color, IPlayer]:
        players: dict[Color, IPlayer] = {}
        for color in Color:
            name = names.get(color, "")
            if settings.game_mode == GameMode.COMPUTER and color == settings.computer_color:
                assert settings.difficulty is not None
                on_request_move, on_cancel = self._computer_hooks
                players[color] = ComputerPlayer(
                    color,
                    settings.difficulty,
                    name or "Computer",
                    on_request_move=on_request_move,
                    on_cancel=on_cancel,
                )
            elif settings.game_mode == GameMode.ONLINE and color != settings.local_color:
                players[color] = RemotePlayer(color, name or "Opponent")
            else:
                players[color] = HumanPlayer(color, name)
        return players

    # ── Moves ────────────────────────────────────────────────────────────

    def submit_move(
        self,
        from_sq: Square | str,
        to_sq: Square | str,
        promotion: PieceType | str | None = None,
    ) -> MoveRecord | None:
        """Play a move for the side to move.

        Returns the history record, or ``None`` when the move is a promotion
        without a chosen piece; it then waits in :attr:`pending_promotion`
        until :meth:`resolve_promotion`.

        Raises:
            InvalidStateTransitionError: the game is not active or a computer
                search is in flight.
            PendingPromotionError: a promotion choice is still open.
            InvalidSquareError: a square is not on the board.
            IllegalMoveError: the move is not legal here.
        """
        self._require_phase(GamePhase.ACTIVE)
        if self._pending_promotion is not None:
            raise PendingPromotionError(
                "Choose a promotion piece for "
                f"{square_name(self._pending_promotion.from_sq)}"
                f"{square_name(self._pending_promotion.to_sq)} first"
            )
        if self._search_request is not None:
            raise InvalidStateTransitionError("The computer is thinking")

        origin = to_square(from_sq)
        target = to_square(to_sq)
        piece_type = self._coerce_promotion(promotion)

        candidates = [
            m
            for m in MoveGenerator(self._state.position).legal_moves_from(origin)
            if m.to_sq == target
        ]
        if not candidates:
            _LOGGER.debug("Rejected %s%s", square_name(origin), square_name(target))
            raise IllegalMoveError(
                f"Illegal move {square_name(origin)}{square_name(target)}"
            )

        if candidates[0].is_promotion:
            if piece_type is None:
                pending = PendingPromotion(origin, target, self._state.side_to_move)
                self._pending_promotion = pending
                for cb in self.events.on_promotion_pending:
                    cb(pending)
                return None
            move = next(m for m in candidates if m.promotion == piece_type)
        else:
            if piece_type is not None:
                raise IllegalMoveError(
                    f"{square_name(origin)}{square_name(target)} is not a promotion"
                )
            move = candidates[0]

        return self._play(move)

    def resolve_promotion(self, piece: PieceType | str) -> MoveRecord:
        """Finish the pending promotion with *piece* (queen/rook/bishop/knight)."""
        pending = self._pending_promotion
        if pending is None:
            raise InvalidStateTransitionError("No promotion is pending")
        self._require_phase(GamePhase.ACTIVE)
        piece_type = self._coerce_promotion(piece)
        if piece_type is None:
            raise IllegalMoveError("A promotion piece is required")
        self._pending_promotion = None
        try:
            record = self.submit_move(pending.from_sq, pending.to_sq, piece_type)
        except ChessError:
            self._pending_promotion = pending
            raise
        assert record is not None
        return record

    def cancel_promotion(self) -> bool:
        """Drop the pending promotion without moving."""
        if self._pending_promotion is None:
            return False
        self._pending_promotion = None
        return True

    def _play(self, move: Move) -> MoveRecord:
        mover = self._state.side_to_move
        record = self._state.apply_move(move)
        _LOGGER.debug("%s played %s", mover, record.san)

        clock = self._clock
        assert clock is not None
        clock.add_increment(mover)
        clock.switch_active(self._state.side_to_move)
        self._draw_offer = None

        result = self._state.terminal_result()
        if result is not None:
            self._close(result)
        for cb in self.events.on_move:
            cb(record, self._state)
        if result is not None:
            self._announce(result)
        else:
            self._prompt_current_player()
        return record

    @staticmethod
    def _coerce_promotion(piece: PieceType | str | None) -> PieceType | None:
        if piece is None:
            return None
        if isinstance(piece, str):
            piece_type = _PROMOTION_CHARS.get(piece.lower())
        else:
            piece_type = piece if piece in PROMOTION_TYPES else None
        if piece_type is None:
            raise IllegalMoveError(f"Cannot promote to {piece!r}")
        return piece_type

    # ── Computer turns ───────────────────────────────────────────────────

    def begin_computer_search(self) -> tuple[int, Position]:
        """Mark a search as in flight and hand out a copy to search on."""
        self._require_phase(GamePhase.ACTIVE)
        player = self.current_player
        if not isinstance(player, ComputerPlayer):
            raise InvalidStateTransitionError("It is not the computer's turn")
        if self._search_request is not None:
            raise InvalidStateTransitionError("A computer search is already running")
        self._next_request_id += 1
        self._search_request = self._next_request_id
        return self._search_request, self._state.position.copy()

    def complete_computer_search(self, request_id: int, move: Move | None) -> MoveRecord | None:
        """Apply the answer to search *request_id*; stale answers are ignored."""
        if request_id != self._search_request:
            _LOGGER.debug("Ignoring stale search result %d", request_id)
            return None
        self._search_request = None
        if move is None:
            return None
        if move not in MoveGenerator(self._state.position).generate_legal_moves():
            raise IllegalMoveError(f"Engine move {move} is not legal here")
        return self._play(move)

    def cancel_computer_search(self) -> bool:
        """Abandon the search in flight, if any."""
        if self._search_request is None:
            return False
        self._search_request = None
        player = self.current_player
        if player is not None:
            player.cancel()
        return True

    def request_computer_move(self, engine: ISearchEngine | None = None) -> MoveRecord | None:
        """Run the computer's search synchronously and play its move."""
        request_id, position = self.begin_computer_search()
        player = self.current_player
        assert isinstance(player, ComputerPlayer)
        engine = engine or self._default_engine()
        try:
            move = engine.select_move(position, player.difficulty)
        except Exception:
            self._search_request = None
            raise
        return self.complete_computer_search(request_id, move)

    def _default_engine(self) -> ISearchEngine:
        if self._engine is None:
            self._engine = MinimaxEngine()
        return self._engine

    # ── Pause / resume ───────────────────────────────────────────────────

    def pause(self) -> None:
        self._require_phase(GamePhase.ACTIVE)
        self.cancel_computer_search()
        assert self._clock is not None
        self._clock.stop()
        self._set_phase(GamePhase.PAUSED)

    def resume(self) -> None:
        self._require_phase(GamePhase.PAUSED)
        assert self._clock is not None
        self._clock.start(self._state.side_to_move)
        self._set_phase(GamePhase.ACTIVE)
        self._prompt_current_player()

    # ── Ending the game ──────────────────────────────────────────────────

    def resign(self, color: Color) -> None:
        self._require_phase(GamePhase.ACTIVE, GamePhase.PAUSED)
        self._end(GameResult.win_for(color.opposite, EndReason.RESIGNATION))

    def offer_draw(self, color: Color) -> None:
        """Offer a draw; immediate unless the game is played online."""
        self._require_phase(GamePhase.ACTIVE)
        assert self._settings is not None
        if self._settings.game_mode != GameMode.ONLINE:
            self._end(GameResult.draw())
            return
        if self._draw_offer is not None:
            raise InvalidStateTransitionError(f"{self._draw_offer} already offered a draw")
        self._draw_offer = color
        for cb in self.events.on_draw_offered:
            cb(color)

    def accept_draw(self, color: Color) -> None:
        self._require_phase(GamePhase.ACTIVE)
        if self._draw_offer is None or self._draw_offer == color:
            raise InvalidStateTransitionError(f"No draw offer for {color} to accept")
        self._end(GameResult.draw())

    def decline_draw(self) -> bool:
        if self._draw_offer is None:
            return False
        self._draw_offer = None
        return True

    def on_clock_expired(self, color: Color) -> None:
        self._require_phase(GamePhase.ACTIVE)
        self._end(GameResult.win_for(color.opposite, EndReason.TIMEOUT))

    def conclude(self, result: GameResult) -> None:
        """End the game with a result decided elsewhere (e.g. abandonment)."""
        self._require_phase(GamePhase.ACTIVE, GamePhase.PAUSED)
        self._end(result)

    def tick(self, elapsed_seconds: int) -> None:
        """Let *elapsed_seconds* pass on the active side's clock."""
        self._require_phase(GamePhase.ACTIVE)
        assert self._clock is not None
        self._state.stats.time_elapsed += elapsed_seconds
        self._clock.tick(elapsed_seconds)

    def _end(self, result: GameResult) -> None:
        self._close(result)
        self._announce(result)

    def _close(self, result: GameResult) -> None:
        self.cancel_computer_search()
        if self._clock is not None:
            self._clock.stop()
        self._result = result
        self._phase = GamePhase.ENDED
        self._pending_promotion = None
        self._draw_offer = None
        _LOGGER.info("Game over: %s after %d plies", result, self._state.ply_count)

    def _announce(self, result: GameResult) -> None:
        self._emit_phase(GamePhase.ENDED)
        for cb in self.events.on_game_over:
            cb(result)

    # ── Observers ────────────────────────────────────────────────────────

    def snapshot(self) -> GameSnapshot:
        state = self._state
        timer: TimerState | None = self._clock.snapshot() if self._clock else None
        return GameSnapshot(
            phase=self.phase,
            fen=state.fen,
            san_history=state.san_history,
            side_to_move=state.side_to_move,
            is_check=state.is_check,
            is_checkmate=state.is_checkmate,
            is_stalemate=state.is_stalemate,
            is_draw=state.is_draw,
            is_game_over=state.is_game_over,
            timer=timer,
            result=self._result,
            captured_by_white=tuple(state.captured.white),
            captured_by_black=tuple(state.captured.black),
        )

    # ── Internal helpers ─────────────────────────────────────────────────

    def _require_phase(self, *allowed: GamePhase) -> None:
        phase = self.phase
        if phase not in allowed:
            wanted = " or ".join(p.name for p in allowed)
            raise InvalidStateTransitionError(f"Game is {phase.name}, expected {wanted}")

    def _prompt_current_player(self) -> None:
        """Ask the current player to move."""
        cp = self.current_player
        if cp is not None and not cp.is_human:
            cp.request_move(self._state.position.copy())

    def _set_phase(self, phase: GamePhase) -> None:
        self._phase = phase
        self._emit_phase(phase)

    def _emit_phase(self, phase: GamePhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)
