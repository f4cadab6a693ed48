"""Typed messages exchanged with the multiplayer room service.

Every message is a frozen dataclass, so it is safe to pass across threads.
:func:`message_to_dict` and :func:`message_from_dict` give the JSON-ready
record form ``{"event": <name>, "data": {...}}`` used on the wire.
"""

from __future__ import annotations

import re
import secrets
import string
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from kingside.core.enums import Color
from kingside.core.errors import InvalidMessageError
from kingside.core.types import parse_square
from kingside.game.result import EndReason, GameResult, Outcome

ROOM_CODE_LENGTH = 6
_ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits
_ROOM_CODE_RE = re.compile(r"^[A-Z0-9]{6}$")
_PROMOTION_CHARS = frozenset("qrbn")


def generate_room_code() -> str:
    """Six random characters from ``A-Z0-9``."""
    return "".join(secrets.choice(_ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


def is_valid_room_code(code: object) -> bool:
    return isinstance(code, str) and _ROOM_CODE_RE.fullmatch(code) is not None


def _require_room_code(code: str) -> None:
    if not is_valid_room_code(code):
        raise InvalidMessageError(f"Invalid room code: {code!r}")


def _require_move(from_sq: str, to_sq: str, promotion: str | None) -> None:
    for name in (from_sq, to_sq):
        try:
            parse_square(name)
        except ValueError:
            raise InvalidMessageError(f"Invalid square in move: {name!r}") from None
    if from_sq == to_sq:
        raise InvalidMessageError(f"Move from {from_sq} to itself")
    if promotion is not None and promotion not in _PROMOTION_CHARS:
        raise InvalidMessageError(f"Invalid promotion piece: {promotion!r}")


@dataclass(frozen=True, slots=True)
class RoomPlayer:
    """A participant as the room service reports it."""

    player_id: str
    name: str
    color: Color


# ── Inbound (room service → client) ──────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class RoomCreated:
    event: ClassVar[str] = "room_created"

    room_id: str
    room_code: str
    players: tuple[RoomPlayer, ...] = ()

    def __post_init__(self) -> None:
        _require_room_code(self.room_code)


@dataclass(frozen=True, slots=True)
class RoomJoined:
    event: ClassVar[str] = "room_joined"

    room_id: str
    room_code: str
    players: tuple[RoomPlayer, ...] = ()

    def __post_init__(self) -> None:
        _require_room_code(self.room_code)


@dataclass(frozen=True, slots=True)
class PlayerJoined:
    event: ClassVar[str] = "player_joined"

    player: RoomPlayer


@dataclass(frozen=True, slots=True)
class PlayerLeft:
    event: ClassVar[str] = "player_left"

    player_id: str


@dataclass(frozen=True, slots=True)
class MoveMade:
    event: ClassVar[str] = "move_made"

    room_id: str
    player_id: str
    from_sq: str
    to_sq: str
    promotion: str | None = None

    def __post_init__(self) -> None:
        _require_move(self.from_sq, self.to_sq, self.promotion)


@dataclass(frozen=True, slots=True)
class GameEnded:
    event: ClassVar[str] = "game_ended"

    result: GameResult


@dataclass(frozen=True, slots=True)
class DrawOffered:
    event: ClassVar[str] = "draw_offered"

    from_player_id: str


@dataclass(frozen=True, slots=True)
class DrawDeclined:
    event: ClassVar[str] = "draw_declined"

    from_player_id: str


@dataclass(frozen=True, slots=True)
class Error:
    event: ClassVar[str] = "error"

    message: str


# ── Outbound (client → room service) ─────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class CreateRoom:
    event: ClassVar[str] = "create_room"

    room_code: str = field(default_factory=generate_room_code)

    def __post_init__(self) -> None:
        _require_room_code(self.room_code)


@dataclass(frozen=True, slots=True)
class JoinRoom:
    event: ClassVar[str] = "join_room"

    room_code: str

    def __post_init__(self) -> None:
        _require_room_code(self.room_code)


@dataclass(frozen=True, slots=True)
class LeaveRoom:
    event: ClassVar[str] = "leave_room"

    room_id: str


@dataclass(frozen=True, slots=True)
class MakeMove:
    event: ClassVar[str] = "make_move"

    room_id: str
    player_id: str
    from_sq: str
    to_sq: str
    promotion: str | None = None

    def __post_init__(self) -> None:
        _require_move(self.from_sq, self.to_sq, self.promotion)


@dataclass(frozen=True, slots=True)
class OfferDraw:
    event: ClassVar[str] = "offer_draw"

    room_id: str


@dataclass(frozen=True, slots=True)
class Resign:
    event: ClassVar[str] = "resign"

    room_id: str


@dataclass(frozen=True, slots=True)
class Rematch:
    event: ClassVar[str] = "rematch"

    room_id: str


@dataclass(frozen=True, slots=True)
class ReportResult:
    event: ClassVar[str] = "report_result"

    room_id: str
    result: GameResult


InboundMessage = (
    RoomCreated
    | RoomJoined
    | PlayerJoined
    | PlayerLeft
    | MoveMade
    | GameEnded
    | DrawOffered
    | DrawDeclined
    | Error
)
OutboundMessage = (
    CreateRoom | JoinRoom | LeaveRoom | MakeMove | OfferDraw | Resign | Rematch | ReportResult
)
Message = InboundMessage | OutboundMessage

_INBOUND_TYPES: tuple[type, ...] = (
    RoomCreated,
    RoomJoined,
    PlayerJoined,
    PlayerLeft,
    MoveMade,
    GameEnded,
    DrawOffered,
    DrawDeclined,
    Error,
)
_OUTBOUND_TYPES: tuple[type, ...] = (
    CreateRoom,
    JoinRoom,
    LeaveRoom,
    MakeMove,
    OfferDraw,
    Resign,
    Rematch,
    ReportResult,
)
_BY_EVENT: dict[str, type] = {cls.event: cls for cls in _INBOUND_TYPES + _OUTBOUND_TYPES}


def is_inbound(message: object) -> bool:
    return isinstance(message, _INBOUND_TYPES)


# ── Record codec ─────────────────────────────────────────────────────────────


def _encode_color(color: Color | None) -> str | None:
    return None if color is None else color.name.lower()


def _decode_color(value: Any) -> Color:
    if value not in ("white", "black"):
        raise InvalidMessageError(f"Invalid color: {value!r}")
    return Color.WHITE if value == "white" else Color.BLACK


def _encode_player(player: RoomPlayer) -> dict[str, Any]:
    return {"id": player.player_id, "name": player.name, "color": _encode_color(player.color)}


def _decode_player(value: Any) -> RoomPlayer:
    if not isinstance(value, Mapping):
        raise InvalidMessageError(f"Invalid player record: {value!r}")
    player_id, name = value.get("id"), value.get("name")
    if not isinstance(player_id, str) or not player_id:
        raise InvalidMessageError(f"Invalid player id: {player_id!r}")
    if not isinstance(name, str) or not name:
        raise InvalidMessageError(f"Invalid player name: {name!r}")
    return RoomPlayer(player_id, name, _decode_color(value.get("color")))


def _encode_result(result: GameResult) -> dict[str, Any]:
    return {
        "result": result.outcome.value,
        "reason": result.reason.value,
        "winner": _encode_color(result.winner),
    }


def _decode_result(value: Any) -> GameResult:
    if not isinstance(value, Mapping):
        raise InvalidMessageError(f"Invalid result record: {value!r}")
    winner = value.get("winner")
    try:
        return GameResult(
            Outcome(value.get("result")),
            EndReason(value.get("reason")),
            None if winner is None else _decode_color(winner),
        )
    except ValueError as exc:
        raise InvalidMessageError(f"Invalid result record {dict(value)!r}: {exc}") from None


def message_to_dict(message: Message) -> dict[str, Any]:
    """JSON-ready record for *message*."""
    data: dict[str, Any] = {}
    for f in fields(message):  # type: ignore[arg-type]
        value = getattr(message, f.name)
        if isinstance(value, GameResult):
            value = _encode_result(value)
        elif isinstance(value, RoomPlayer):
            value = _encode_player(value)
        elif isinstance(value, tuple):
            value = [_encode_player(p) for p in value]
        data[f.name] = value
    return {"event": message.event, "data": data}


def message_from_dict(record: Mapping[str, Any]) -> Message:
    """Rebuild a message from its record form.

    Raises:
        InvalidMessageError: unknown event, missing or malformed fields.
    """
    if not isinstance(record, Mapping):
        raise InvalidMessageError(f"Message record must be a mapping, got {record!r}")
    event = record.get("event")
    cls = _BY_EVENT.get(event) if isinstance(event, str) else None
    if cls is None:
        raise InvalidMessageError(f"Unknown event: {event!r}")
    data = record.get("data", {})
    if not isinstance(data, Mapping):
        raise InvalidMessageError(f"{cls.event} data must be a mapping")

    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        if f.name == "result":
            value = _decode_result(value)
        elif f.name == "player":
            value = _decode_player(value)
        elif f.name == "players":
            if not isinstance(value, list):
                raise InvalidMessageError(f"players must be a list, got {value!r}")
            value = tuple(_decode_player(p) for p in value)
        elif value is not None and not isinstance(value, str):
            raise InvalidMessageError(f"{cls.event}.{f.name} must be a string, got {value!r}")
        kwargs[f.name] = value
    try:
        return cls(**kwargs)
    except TypeError as exc:
        raise InvalidMessageError(f"Incomplete {cls.event} message: {exc}") from None


__all__ = [
    "CreateRoom",
    "DrawDeclined",
    "DrawOffered",
    "Error",
    "GameEnded",
    "InboundMessage",
    "JoinRoom",
    "LeaveRoom",
    "MakeMove",
    "Message",
    "MoveMade",
    "OfferDraw",
    "OutboundMessage",
    "PlayerJoined",
    "PlayerLeft",
    "Rematch",
    "ReportResult",
    "Resign",
    "RoomCreated",
    "RoomJoined",
    "RoomPlayer",
    "generate_room_code",
    "is_inbound",
    "is_valid_room_code",
    "message_from_dict",
    "message_to_dict",
]
