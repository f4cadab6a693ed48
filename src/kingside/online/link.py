"""Bridge between a :class:`GameSession` and the room-service channel."""

from __future__ import annotations

import logging
import queue

from kingside.core.enums import Color
from kingside.core.errors import (
    IllegalMoveError,
    InvalidMessageError,
    InvalidStateTransitionError,
)
from kingside.core.piece import piece_type_char
from kingside.core.types import square_name
from kingside.game.interfaces import GamePhase
from kingside.game.result import EndReason, GameResult
from kingside.game.session import GameSession
from kingside.game.state import GameState, MoveRecord
from kingside.online.messages import (
    CreateRoom,
    DrawDeclined,
    DrawOffered,
    Error,
    GameEnded,
    InboundMessage,
    JoinRoom,
    LeaveRoom,
    MakeMove,
    MoveMade,
    OfferDraw,
    OutboundMessage,
    PlayerJoined,
    PlayerLeft,
    Rematch,
    ReportResult,
    Resign,
    RoomCreated,
    RoomJoined,
    RoomPlayer,
)

_LOGGER = logging.getLogger(__name__)


class MultiplayerLink:
    """Keeps one online session in step with the room service.

    Local moves, draw offers and results are published as outbound messages
    on :attr:`outbox`, a thread-safe queue drained by the transport.
    Inbound messages go through :meth:`dispatch`, which applies remote moves
    with the same ``submit_move`` path local moves take.  Nothing is echoed
    back while an inbound message is being applied.
    """

    __slots__ = (
        "_session",
        "_local_color",
        "_player_id",
        "_room_id",
        "_room_code",
        "_roster",
        "_dispatching",
        "_last_error",
        "outbox",
    )

    def __init__(self, session: GameSession, local_color: Color, player_id: str) -> None:
        self._session = session
        self._local_color = local_color
        self._player_id = player_id
        self._room_id: str | None = None
        self._room_code: str | None = None
        self._roster: dict[str, RoomPlayer] = {}
        self._dispatching = False
        self._last_error: str | None = None
        self.outbox: queue.Queue[OutboundMessage] = queue.Queue()

        events = session.events
        events.on_move.append(self._on_move)
        events.on_draw_offered.append(self._on_draw_offered)
        events.on_game_over.append(self._on_game_over)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def local_color(self) -> Color:
        return self._local_color

    @property
    def room_id(self) -> str | None:
        return self._room_id

    @property
    def room_code(self) -> str | None:
        return self._room_code

    @property
    def roster(self) -> tuple[RoomPlayer, ...]:
        return tuple(self._roster.values())

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def is_room_full(self) -> bool:
        return len(self._roster) >= 2

    # ── Outbound actions ─────────────────────────────────────────────────

    def create_room(self, room_code: str | None = None) -> str:
        message = CreateRoom() if room_code is None else CreateRoom(room_code)
        self._publish(message)
        return message.room_code

    def join_room(self, room_code: str) -> None:
        self._publish(JoinRoom(room_code))

    def leave_room(self) -> None:
        self._publish(LeaveRoom(self._require_room()))
        self._room_id = None
        self._room_code = None
        self._roster.clear()

    def request_rematch(self) -> None:
        self._publish(Rematch(self._require_room()))

    def drain(self) -> list[OutboundMessage]:
        """Take every message currently queued on the outbox."""
        messages: list[OutboundMessage] = []
        while True:
            try:
                messages.append(self.outbox.get_nowait())
            except queue.Empty:
                return messages

    def close(self) -> None:
        """Stop listening to the session."""
        events = self._session.events
        for handlers, handler in (
            (events.on_move, self._on_move),
            (events.on_draw_offered, self._on_draw_offered),
            (events.on_game_over, self._on_game_over),
        ):
            if handler in handlers:
                handlers.remove(handler)

    # ── Inbound ──────────────────────────────────────────────────────────

    def dispatch(self, message: InboundMessage) -> None:
        """Apply one message received from the room service.

        Raises:
            InvalidMessageError: *message* is not an inbound message.
            ChessError: a remote move or result does not fit the local game.
        """
        self._dispatching = True
        try:
            self._apply(message)
        finally:
            self._dispatching = False

    def _apply(self, message: InboundMessage) -> None:
        session = self._session
        if isinstance(message, (RoomCreated, RoomJoined)):
            self._room_id = message.room_id
            self._room_code = message.room_code
            self._roster = {p.player_id: p for p in message.players}
            _LOGGER.info("In room %s with %d player(s)", message.room_code, len(self._roster))
        elif isinstance(message, PlayerJoined):
            self._roster[message.player.player_id] = message.player
        elif isinstance(message, PlayerLeft):
            self._roster.pop(message.player_id, None)
        elif isinstance(message, MoveMade):
            if message.player_id == self._player_id:
                return
            if session.state.side_to_move != self._local_color.opposite:
                _LOGGER.warning(
                    "Remote move %s%s arrived on the local turn", message.from_sq, message.to_sq
                )
                raise IllegalMoveError(
                    f"Remote move {message.from_sq}{message.to_sq} out of turn"
                )
            try:
                session.submit_move(message.from_sq, message.to_sq, message.promotion)
            except Exception:
                _LOGGER.warning(
                    "Remote move %s%s rejected", message.from_sq, message.to_sq
                )
                raise
        elif isinstance(message, GameEnded):
            if session.phase in (GamePhase.ACTIVE, GamePhase.PAUSED):
                session.conclude(message.result)
        elif isinstance(message, DrawOffered):
            if message.from_player_id != self._player_id:
                session.offer_draw(self._local_color.opposite)
        elif isinstance(message, DrawDeclined):
            session.decline_draw()
        elif isinstance(message, Error):
            self._last_error = message.message
            _LOGGER.warning("Room service error: %s", message.message)
        else:
            raise InvalidMessageError(f"Not an inbound message: {message!r}")

    # ── Session listeners ────────────────────────────────────────────────

    def _on_move(self, record: MoveRecord, _state: GameState) -> None:
        if self._dispatching or record.color != self._local_color or self._room_id is None:
            return
        move = record.move
        promotion = piece_type_char(move.promotion) if move.promotion is not None else None
        self._publish(
            MakeMove(
                room_id=self._room_id,
                player_id=self._player_id,
                from_sq=square_name(move.from_sq),
                to_sq=square_name(move.to_sq),
                promotion=promotion,
            )
        )

    def _on_draw_offered(self, color: Color) -> None:
        if self._dispatching or color != self._local_color or self._room_id is None:
            return
        self._publish(OfferDraw(self._room_id))

    def _on_game_over(self, result: GameResult) -> None:
        room_id = self._room_id
        if self._dispatching or room_id is None:
            return
        if result.reason == EndReason.RESIGNATION and result.loser == self._local_color:
            self._publish(Resign(room_id))
        else:
            self._publish(ReportResult(room_id, result))

    # ── Internal ─────────────────────────────────────────────────────────

    def _require_room(self) -> str:
        if self._room_id is None:
            raise InvalidStateTransitionError("Not in a room")
        return self._room_id

    def _publish(self, message: OutboundMessage) -> None:
        _LOGGER.debug("-> %s", message)
        self.outbox.put(message)
